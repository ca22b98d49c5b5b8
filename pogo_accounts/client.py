"""HTTP client for the Pogo Accounts API."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import httpx

DEFAULT_BASE_URL = os.getenv("POGO_API_URL", "http://localhost:5200")
ACCOUNTS_PATH = "/pogo-accounts"
ACCOUNT_ID_LENGTH = 24


class ApiError(Exception):
    """Non-success response from the API."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class InvalidAccountId(ValueError):
    """Raised locally for ids that cannot be valid, before any request."""


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase


class PogoAccountsClient:
    """Thin synchronous wrapper over the five account operations."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 20,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> "PogoAccountsClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = self._http.request(method, path, **kwargs)
        if response.status_code == 304:
            return response
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health").json()

    def list_accounts(self) -> List[Dict[str, Any]]:
        return self._request("GET", ACCOUNTS_PATH).json()

    def get_account(self, account_id: str) -> Dict[str, Any]:
        return self._request("GET", f"{ACCOUNTS_PATH}/{account_id}").json()

    def create_account(self, account: Dict[str, Any]) -> str:
        """Create an account and return its id."""

        return self._request("POST", ACCOUNTS_PATH, json=account).json()["id"]

    def update_account(self, account_id: str, account: Dict[str, Any]) -> Optional[str]:
        """Update an account; returns the server message, or None if unchanged."""

        response = self._request("PUT", f"{ACCOUNTS_PATH}/{account_id}", json=account)
        if response.status_code == 304:
            return None
        return response.json()["message"]

    def delete_account(self, account_id: str) -> str:
        """Delete an account and return the deleted id."""

        if not isinstance(account_id, str) or len(account_id) != ACCOUNT_ID_LENGTH:
            raise InvalidAccountId("Invalid account ID format")
        return self._request("DELETE", f"{ACCOUNTS_PATH}/{account_id}").json()["deletedId"]


__all__ = [
    "ACCOUNT_ID_LENGTH",
    "ApiError",
    "DEFAULT_BASE_URL",
    "InvalidAccountId",
    "PogoAccountsClient",
]
