"""
HTTP client for the billing API.
Mirrors the calls the billing SPA makes, for scripts and smoke checks.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:5000"


@dataclass
class ClientConfig:
    """Client settings"""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 7
    max_retries: int = 3


class BillingAPIError(Exception):
    """Error response from the billing API"""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class BillingClient:
    """
    Thin wrapper over the billing HTTP API.
    GET requests are retried on transport errors; writes are sent once.
    """

    SAFE_METHODS = {"GET", "HEAD"}

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'BillingClient/1.0',
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        })

    @classmethod
    def from_env(cls) -> "BillingClient":
        return cls(ClientConfig(base_url=os.getenv("BILLING_API_URL", DEFAULT_BASE_URL)))

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *_exc):
        self.close()

    def _url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _make_request(self, method: str, path: str, **kwargs) -> Any:
        """
        Send a request and decode the JSON body.

        Args:
            method: HTTP method
            path: API path, e.g. "/products"
            **kwargs: extra arguments for requests

        Returns:
            decoded JSON body
        """
        url = self._url(path)
        attempts = self.config.max_retries if method.upper() in self.SAFE_METHODS else 1
        for attempt in range(attempts):
            try:
                response = self.session.request(method, url, timeout=self.config.timeout, **kwargs)
                break
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                logger.warning(f"Attempt {attempt + 1} failed for {method} {url}: {e}")
                if attempt == attempts - 1:
                    raise

        if not response.ok:
            try:
                message = response.json().get("error") or response.reason
            except ValueError:
                message = response.reason
            raise BillingAPIError(response.status_code, message)
        return response.json()

    def health(self) -> Dict[str, Any]:
        return self._make_request("GET", "/health")

    def list_products(self) -> List[Dict[str, Any]]:
        return self._make_request("GET", "/products")

    def create_bill(self, customer_name: str, items: List[Dict[str, int]]) -> int:
        """
        Create a bill.

        Args:
            customer_name: customer name
            items: [{"product_id": ..., "quantity": ...}]

        Returns:
            new bill id
        """
        payload = {"customer_name": customer_name, "items": items}
        return self._make_request("POST", "/bill", json=payload)["bill_id"]

    def get_bill(self, bill_id: int) -> Dict[str, Any]:
        return self._make_request("GET", f"/bill/{bill_id}")

    def customer_bills(self, customer_name: str) -> Dict[str, Any]:
        return self._make_request("GET", f"/bills/{quote(customer_name, safe='')}")

    def set_stock(self, product_id: int, stock: int) -> None:
        self._make_request("PUT", f"/products/{product_id}/stock", json={"stock": stock})

    def reset_stock(self) -> str:
        return self._make_request("POST", "/reset-stock")["message"]

    def reset_stock_to_defaults(self) -> str:
        return self._make_request("PUT", "/reset-stock")["message"]
