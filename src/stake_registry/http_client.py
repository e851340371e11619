from typing import Any, Dict

import requests
from requests.adapters import HTTPAdapter


class HttpClient:
    """Single-attempt JSON POST over a pooled session."""

    def __init__(self, timeout: float, user_agent: str) -> None:
        self.timeout = timeout
        self.session = requests.Session()
        adapter = HTTPAdapter(max_retries=0, pool_connections=2, pool_maxsize=4)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.session.headers.update({"User-Agent": user_agent, "Content-Type": "application/json"})

    def post(self, url: str, payload: Dict[str, Any]) -> requests.Response:
        return self.session.post(url, json=payload, timeout=self.timeout)

    def close(self) -> None:
        self.session.close()
