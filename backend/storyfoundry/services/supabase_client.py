"""Async client for the Supabase auth (GoTrue) and database (PostgREST) APIs."""
from typing import Any, Dict, Optional
import logging
import time

import httpx

from storyfoundry.core.config import settings
from storyfoundry.infrastructure.observability import SUPABASE_REQUEST_DURATION
from storyfoundry.shared_kernel.exceptions import AuthenticationError, SupabaseError

logger = logging.getLogger(__name__)

SINGLE_OBJECT = "application/vnd.pgrst.object+json"
NO_ROWS_CODE = "PGRST116"
AUTH_SESSION_MISSING = "Auth session missing!"


def _error_message(response: httpx.Response) -> tuple[str, Optional[str]]:
    """Extract ``(message, code)`` from a GoTrue or PostgREST error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}", None
    if not isinstance(body, dict):
        return str(body), None
    message = (
        body.get("message")
        or body.get("msg")
        or body.get("error_description")
        or body.get("error")
        or response.text
    )
    code = body.get("code") or body.get("error_code")
    return str(message), str(code) if code is not None else None


class SupabaseClient:
    """Thin wrapper over the Supabase REST surface.

    ``api_key`` is the anon key for user-scoped clients (row-level security
    applies through ``access_token``) or the service-role key for the
    privileged client.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self.timeout = timeout if timeout is not None else settings.SUPABASE_TIMEOUT

    def _headers(self, **extra: str) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Content-Type": "application/json",
        }
        headers.update(extra)
        return headers

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        headers: Dict[str, str],
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
    ) -> httpx.Response:
        start = time.perf_counter()
        async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout)) as client:
            try:
                return await client.request(
                    method,
                    f"{self.base_url}{path}",
                    headers=headers,
                    params=params,
                    json=json,
                )
            except httpx.HTTPError as exc:
                raise SupabaseError(
                    f"Supabase connection error: {exc}",
                    code="SUPABASE_UNAVAILABLE",
                ) from exc
            finally:
                SUPABASE_REQUEST_DURATION.labels(operation).observe(time.perf_counter() - start)

    # Auth

    async def get_user(self) -> Dict[str, Any]:
        """Return the user owning ``access_token``.

        Raises:
            AuthenticationError: no token, or the token was rejected
            SupabaseError: the auth server could not be reached or failed
        """
        if not self.access_token:
            raise AuthenticationError(AUTH_SESSION_MISSING, code="SESSION_MISSING")

        response = await self._request("auth.get_user", "GET", "/auth/v1/user", self._headers())
        if response.status_code in (401, 403):
            message, _ = _error_message(response)
            raise AuthenticationError(message, code="SESSION_INVALID")
        if response.status_code != 200:
            message, code = _error_message(response)
            raise SupabaseError(message, code=code or "AUTH_ERROR", status=response.status_code)

        user = response.json()
        if not isinstance(user, dict) or not user.get("id"):
            raise AuthenticationError("No user found", code="SESSION_INVALID")
        return user

    async def sign_out(self, scope: str = "global") -> None:
        """Revoke the session behind ``access_token``."""
        if not self.access_token:
            return
        response = await self._request(
            "auth.sign_out",
            "POST",
            "/auth/v1/logout",
            self._headers(),
            params={"scope": scope},
        )
        # An already expired session cannot be revoked; that is still signed out.
        if response.status_code not in (200, 204, 401, 403, 404):
            message, code = _error_message(response)
            raise SupabaseError(message, code=code or "AUTH_ERROR", status=response.status_code)

    # Database

    async def select_single(
        self,
        table: str,
        columns: str,
        **filters: Any,
    ) -> Optional[Dict[str, Any]]:
        """Fetch exactly one row matching the equality ``filters``.

        Returns None when no row is visible to this client.
        """
        params = {"select": columns}
        for column, value in filters.items():
            params[column] = f"eq.{value}"

        response = await self._request(
            f"db.select.{table}",
            "GET",
            f"/rest/v1/{table}",
            self._headers(Accept=SINGLE_OBJECT),
            params=params,
        )
        if response.status_code == 200:
            return response.json()

        message, code = _error_message(response)
        if response.status_code == 406 and code in (None, NO_ROWS_CODE):
            return None
        raise SupabaseError(message, code=code or "DB_ERROR", status=response.status_code)

    async def insert(self, table: str, row: Dict[str, Any], returning: bool = True) -> Optional[Dict[str, Any]]:
        """Insert ``row`` and return the stored representation."""
        headers = self._headers(
            Prefer="return=representation" if returning else "return=minimal",
        )
        if returning:
            headers["Accept"] = SINGLE_OBJECT

        response = await self._request(
            f"db.insert.{table}",
            "POST",
            f"/rest/v1/{table}",
            headers,
            json=row,
        )
        if response.status_code not in (200, 201, 204):
            message, code = _error_message(response)
            raise SupabaseError(message, code=code or "DB_ERROR", status=response.status_code)
        if not returning:
            return None
        return response.json()
