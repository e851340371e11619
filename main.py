import argparse
import json
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Optional

import yaml

from stake_registry import RegistryConfig, RpcProtocolError, StakeRegistry, TransportError


def configure_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt="%(asctime)sZ %(levelname)s %(message)s", datefmt="%Y-%m-%dT%H:%M:%S"))
    logging.Formatter.converter = time.gmtime  # UTC
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def load_config(config_path: Path, pool_address: Optional[str] = None) -> RegistryConfig:
    raw = {}
    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    config = RegistryConfig.from_mapping(raw)
    if pool_address:
        config = replace(config, pool=replace(config.pool, pool_address=pool_address))
    return config


def main() -> int:
    parser = argparse.ArgumentParser(description="Staking pool snapshot")
    parser.add_argument("--config", type=Path, default=Path("stake_registry.yaml"))
    parser.add_argument("--pool", default=None, help="Pool address overriding the configured one")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write the snapshot JSON")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    configure_logging(args.verbose)
    config = load_config(args.config, pool_address=args.pool)
    with StakeRegistry(config) as registry:
        try:
            snapshot = registry.snapshot()
        except (TransportError, RpcProtocolError) as exc:
            logging.getLogger("stake_registry").error("snapshot failed: %s", exc)
            return 1

    text = json.dumps(snapshot.to_dict(), indent=2)
    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
