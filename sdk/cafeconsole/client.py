"""Cafe console API client"""
import logging
import threading
from typing import Any, Dict, List, NamedTuple, Optional

import requests

from cafeconsole.config import settings
from cafeconsole.exceptions import APIError, AuthenticationError, NetworkError
from cafeconsole.models import AdminAccount

logger = logging.getLogger(__name__)


class LoginResult(NamedTuple):
    token: str
    user: AdminAccount
    expires_in: int


class CafeConsoleClient:
    """Client for the cafe console API.

    Every call takes the bearer token explicitly; the client itself holds no
    session state. Which token is current is the credential store's business.

    Failures are triaged into three exception types:

    - :class:`AuthenticationError` for 401/403 (the credential was rejected)
    - :class:`APIError` for any other non-2xx response
    - :class:`NetworkError` when no response arrived at all
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """
        Initialize the client.

        Args:
            base_url: API origin (e.g. ``http://localhost:8000``). Defaults to
                      the ``CAFE_API_URL`` setting.
            timeout:  Per-request timeout in seconds.
        """
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.CAFE_REQUEST_TIMEOUT
        self.session = requests.Session()

    # ---------------------------------------------------------------------------
    # Internal request handling
    # ---------------------------------------------------------------------------

    @staticmethod
    def _auth_headers(token: Optional[str]) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"} if token else {}

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(body, dict):
            return str(body.get("detail") or body.get("message") or "")
        return ""

    def _request(
        self,
        method: str,
        endpoint: str,
        token: Optional[str] = None,
        **kwargs: Any,
    ) -> requests.Response:
        """Make an HTTP request to the console API.

        Args:
            method:   HTTP method (``GET``, ``POST``, etc.).
            endpoint: API path (e.g. ``/admins``).
            token:    Bearer token, if the endpoint is authenticated.
            **kwargs: Forwarded to ``requests.Session.request``.

        Raises:
            AuthenticationError: On 401/403.
            APIError:            On any other non-2xx response.
            NetworkError:        When the request could not be completed.
        """
        url = f"{self.base_url}{endpoint}"
        headers = kwargs.pop("headers", {})
        headers.update(self._auth_headers(token))
        kwargs.setdefault("timeout", self.timeout)

        try:
            response = self.session.request(method, url, headers=headers, **kwargs)
        except requests.RequestException as exc:
            raise NetworkError(f"{method} {endpoint} failed: {exc}") from exc

        if response.status_code in (401, 403):
            raise AuthenticationError(response.status_code, self._error_detail(response))
        if not response.ok:
            raise APIError(response.status_code, self._error_detail(response))
        return response

    # ========== Authentication ==========

    def login(self, email: str, password: str, remember_me: bool = False) -> LoginResult:
        """Exchange email and password for a bearer token."""
        response = self._request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password, "remember_me": remember_me},
        )
        data = response.json()
        return LoginResult(
            token=data["access_token"],
            user=AdminAccount.model_validate(data["user"]),
            expires_in=data.get("expires_in", 0),
        )

    def me(self, token: str) -> AdminAccount:
        """Resolve the authoritative account for ``token``."""
        response = self._request("GET", "/auth/me", token=token)
        return AdminAccount.model_validate(response.json())

    def heartbeat(self, token: str) -> None:
        """Tell the server this admin is still in the console."""
        self._request("POST", "/auth/heartbeat", token=token)

    def logout(self, token: str) -> None:
        """Mark this admin inactive, waiting for the server to confirm."""
        self._request("POST", "/auth/logout", token=token)

    def send_logout_beacon(self, token: str) -> None:
        """Fire-and-forget logout for page unload.

        Returns immediately; the request runs on a daemon thread, is never
        retried, and its outcome is discarded. If it is lost, the server ages
        the presence record out by heartbeat timeout.
        """
        url = f"{self.base_url}/auth/logout"
        headers = self._auth_headers(token)
        threading.Thread(target=_deliver_beacon, args=(url, headers), daemon=True).start()

    # ========== Admin accounts ==========

    def list_admins(self, token: str) -> List[AdminAccount]:
        """Roster snapshot (manager or owner)."""
        response = self._request("GET", "/admins", token=token)
        return [AdminAccount.model_validate(item) for item in response.json()]

    def get_admin(self, token: str, admin_id: str) -> AdminAccount:
        response = self._request("GET", f"/admins/{admin_id}", token=token)
        return AdminAccount.model_validate(response.json())

    def create_admin(
        self,
        token: str,
        full_name: str,
        email: str,
        password: str,
        role: str,
    ) -> AdminAccount:
        """Create an admin account (owner only)."""
        response = self._request(
            "POST",
            "/admins",
            token=token,
            json={"full_name": full_name, "email": email, "password": password, "role": role},
        )
        return AdminAccount.model_validate(response.json())

    def update_admin(
        self,
        token: str,
        admin_id: str,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        role: Optional[str] = None,
    ) -> AdminAccount:
        """Update an admin account. Only the fields given are sent."""
        payload: Dict[str, Any] = {}
        if full_name is not None:
            payload["full_name"] = full_name
        if email is not None:
            payload["email"] = email
        if role is not None:
            payload["role"] = role
        response = self._request("PUT", f"/admins/{admin_id}", token=token, json=payload)
        return AdminAccount.model_validate(response.json())

    def reset_admin_password(self, token: str, admin_id: str, new_password: str) -> None:
        """Set a new password for an admin (owner only)."""
        self._request(
            "POST",
            f"/admins/{admin_id}/reset-password",
            token=token,
            json={"new_password": new_password},
        )

    def delete_admin(self, token: str, admin_id: str) -> None:
        """Delete an admin account (owner only)."""
        self._request("DELETE", f"/admins/{admin_id}", token=token)


def _deliver_beacon(url: str, headers: Dict[str, str]) -> None:
    try:
        requests.post(url, headers=headers, timeout=5)
    except requests.RequestException as exc:
        logger.debug("Logout beacon dropped: %s", exc)
