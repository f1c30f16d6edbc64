"""Base API client for making HTTP requests to the Barberzon backend."""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import httpx

from .. import config

logger = logging.getLogger(__name__)

TOKEN_KEYS = ("token", "auth_token", "user")


class ApiError(Exception):
    """Raised for any non-2xx response; status 0 means no response arrived"""

    def __init__(self, status_code: int, message: str, payload: Any = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload


class TokenStore:
    """In-memory key/value store for the session token and cached user."""

    def __init__(self):
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any):
        self._data[key] = value

    def remove(self, key: str):
        self._data.pop(key, None)


class FileTokenStore(TokenStore):
    """TokenStore persisted as a JSON file."""

    def __init__(self, path):
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            self._data = json.loads(self.path.read_text() or "{}")

    def _save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data))

    def set(self, key: str, value: Any):
        super().set(key, value)
        self._save()

    def remove(self, key: str):
        super().remove(key)
        self._save()


def _error_message(response: httpx.Response) -> tuple[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase, None
    if isinstance(payload, dict) and "detail" in payload:
        detail = payload["detail"]
        return detail if isinstance(detail, str) else json.dumps(detail), payload
    return response.reason_phrase, payload


class ApiClient:
    def __init__(
        self,
        base_url: str = None,
        store: Optional[TokenStore] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 15.0,
    ):
        self.store = store if store is not None else TokenStore()
        self.on_unauthorized = on_unauthorized
        self._http = httpx.Client(
            base_url=base_url or config.API_BASE_URL,
            transport=transport,
            timeout=timeout,
            event_hooks={"request": [self._attach_token]},
        )

    @property
    def token(self) -> Optional[str]:
        return self.store.get("auth_token") or self.store.get("token")

    def set_token(self, token: str):
        self.store.set("token", token)
        self.store.set("auth_token", token)

    def clear_token(self):
        for key in TOKEN_KEYS:
            self.store.remove(key)

    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _attach_token(self, request: httpx.Request):
        token = self.token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    def request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise ApiError(0, str(e) or type(e).__name__) from e
        if response.status_code == 401:
            # Session is gone: drop it and send the user back to login
            self.clear_token()
            if self.on_unauthorized is not None:
                self.on_unauthorized()
        if response.is_error:
            message, payload = _error_message(response)
            logger.error("%s %s failed: %s %s", method, url, response.status_code, message)
            raise ApiError(response.status_code, message, payload)
        if not response.content:
            return None
        return response.json()

    def get(self, url: str, params: Optional[dict] = None) -> Any:
        return self.request("GET", url, params=_drop_none(params))

    def post(self, url: str, data: Any = None, form: Optional[dict] = None) -> Any:
        if form is not None:
            return self.request("POST", url, data=form)
        return self.request("POST", url, json=data)

    def put(self, url: str, data: Any = None) -> Any:
        return self.request("PUT", url, json=data)

    def patch(self, url: str, data: Any = None) -> Any:
        return self.request("PATCH", url, json=data)

    def delete(self, url: str, data: Any = None) -> Any:
        if data is None:
            return self.request("DELETE", url)
        return self.request("DELETE", url, json=data)

    def close(self):
        self._http.close()


def _drop_none(params: Optional[dict]) -> Optional[dict]:
    if params is None:
        return None
    return {k: v for k, v in params.items() if v is not None}
