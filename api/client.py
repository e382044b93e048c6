# api/client.py
"""
Small HTTP client for the build API, for smoke checks and for services that
want bundles without speaking the JSON shape by hand.
"""

from typing import Dict

import requests

DEFAULT_REQUEST_TIMEOUT = 300  # builds include a container start


class BuildServiceClient:
    # statuses that carry the service's JSON body rather than an HTTP-level error
    JSON_STATUSES = (200, 400, 413, 500)

    def __init__(self, base_url: str, timeout: float = DEFAULT_REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def build_artifact(self, source_code: str) -> Dict:
        """
        POST the source and return the decoded response body, success or not.
        Raises requests.HTTPError for statuses the service does not produce.
        """
        resp = requests.post(
            f"{self.base_url}/api/build-artifact",
            json={"sourceCode": source_code},
            timeout=self.timeout,
        )
        if resp.status_code not in self.JSON_STATUSES:
            resp.raise_for_status()
        return resp.json()

    def health(self) -> bool:
        try:
            resp = requests.get(f"{self.base_url}/health", timeout=5)
        except requests.RequestException:
            return False
        return resp.ok and resp.json().get("ok") is True
