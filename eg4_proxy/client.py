"""
Async HTTP client for the EG4 monitoring web API.

Every call opens a short-lived ``httpx.AsyncClient`` against the configured
base URL and sends the stored session cookie explicitly, so no cookie jar is
shared between calls. Upstream HTTP status codes are not interpreted: the
decoded JSON body is returned as-is and callers decide what it means. Only
transport failures and undecodable bodies are raised, as UpstreamError.

Operations:
- login(account, password): form login, returns the session cookie string.
- post_form(path, data, cookie): form-encoded POST, returns decoded JSON.
- get_json(path, params, cookie): GET with query params, returns decoded JSON.
- post_json(path, payload, cookie): JSON POST, returns decoded JSON.
- read_registers(serial_num, start, count, cookie): one remote-read batch.

CHANGELOG:
- 2026-10-16: Drop unused base_url property; narrow AuthError to login rejection
- 2026-10-14: Add read_registers for the working-mode batches
- 2026-10-12: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

LOGIN_PATH = "/web/login"
REMOTE_READ_PATH = "/web/maintain/remoteRead/read"

_FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class Eg4Error(Exception):
    """Base class for failures talking to the EG4 API."""


class AuthError(Eg4Error):
    """The upstream login rejected the credentials and set no session cookie."""


class UpstreamError(Eg4Error):
    """Network failure or an unexpected response from the upstream API."""


def extract_session_cookie(response: httpx.Response) -> str | None:
    """Reduce the Set-Cookie headers of a response to a Cookie header value.

    Only the ``name=value`` part of each cookie is kept; attributes such as
    Path or HttpOnly are dropped.

    Returns:
        The cookies joined by ``"; "``, or None when the response set none.
    """
    raw = response.headers.get_list("set-cookie")
    if not raw:
        return None
    return "; ".join(cookie.split(";")[0].strip() for cookie in raw)


class Eg4Client:
    """Thin async wrapper over the EG4 web endpoints used by the proxy.

    Args:
        base_url: EG4 API root, e.g. ``https://monitor.eg4electronics.com/WManage``.
        transport: Optional httpx transport, used by tests to stub the upstream.
    """

    def __init__(
        self,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def login(self, account: str, password: str) -> str:
        """Authenticate with the EG4 web login form.

        Redirects are not followed: the session cookie is set on the login
        response itself.

        Returns:
            The session cookie to send with later requests.

        Raises:
            AuthError: If the upstream did not set any cookie.
            UpstreamError: On transport failure.
        """
        async with self._http() as client:
            try:
                response = await client.post(
                    LOGIN_PATH,
                    data={"account": account, "password": password},
                    headers=_FORM_HEADERS,
                    follow_redirects=False,
                )
            except httpx.HTTPError as exc:
                raise UpstreamError(str(exc) or exc.__class__.__name__) from exc

        cookie = extract_session_cookie(response)
        if cookie is None:
            logger.warning(
                "EG4 login returned no session cookie (HTTP %d)", response.status_code
            )
            raise AuthError("Authentication failed - invalid credentials")
        return cookie

    async def post_form(
        self, path: str, data: dict[str, Any], cookie: str
    ) -> Any:
        """POST a form-encoded body with the session cookie."""
        headers = {**_FORM_HEADERS, "Cookie": cookie}
        return await self._request("POST", path, data=data, headers=headers)

    async def get_json(
        self, path: str, params: dict[str, Any], cookie: str
    ) -> Any:
        """GET with query parameters and the session cookie."""
        return await self._request(
            "GET", path, params=params, headers={"Cookie": cookie}
        )

    async def post_json(self, path: str, payload: dict[str, Any], cookie: str) -> Any:
        """POST a JSON body with the session cookie."""
        return await self._request(
            "POST", path, json=payload, headers={"Cookie": cookie}
        )

    async def read_registers(
        self, serial_num: str, start: int, count: int, cookie: str
    ) -> dict[str, Any]:
        """Read one batch of holding registers as named fields.

        The remote-read endpoint answers with a flat object whose keys are
        register field names (``HOLD_AC_CHARGE_START_HOUR`` and so on) next
        to a ``success`` flag.

        Raises:
            UpstreamError: If the response is not an object or reports failure.
        """
        body = await self.post_form(
            REMOTE_READ_PATH,
            {
                "inverterSn": serial_num,
                "startRegister": start,
                "pointNumber": count,
                "autoRetry": "true",
            },
            cookie,
        )
        if not isinstance(body, dict):
            raise UpstreamError(
                f"Register read {start}+{count} returned a non-object response"
            )
        if body.get("success") is False:
            message = body.get("msg") or body.get("message") or "unknown error"
            raise UpstreamError(f"Register read {start}+{count} failed: {message}")
        return body

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self._base_url, transport=self._transport)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send one request and decode its JSON body.

        Raises:
            UpstreamError: On transport failure or a body that is not JSON.
        """
        async with self._http() as client:
            try:
                response = await client.request(method, path, **kwargs)
            except httpx.HTTPError as exc:
                logger.warning("EG4 %s %s failed: %s", method, path, exc)
                raise UpstreamError(str(exc) or exc.__class__.__name__) from exc

        try:
            return response.json()
        except ValueError as exc:
            logger.warning(
                "EG4 %s %s returned non-JSON body (HTTP %d)",
                method,
                path,
                response.status_code,
            )
            raise UpstreamError(
                f"Unexpected response from EG4 {path} (HTTP {response.status_code})"
            ) from exc
