"""
FastAPI dependency providers and request helpers.

Provides the upstream client and settings stored on app.state, plus a body
reader that accepts both JSON and form-encoded requests.

CHANGELOG:
- 2026-10-13: Accept form-encoded bodies in read_body
- 2026-10-12: Initial creation
"""

from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request

from eg4_proxy.auth.session import (
    SessionContext,
    get_session,
    require_device,
    require_session,
)
from eg4_proxy.client import Eg4Client
from eg4_proxy.config import ProxySettings

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_eg4_client(request: Request) -> Eg4Client:
    """Return the shared upstream client built at startup."""
    return request.app.state.eg4_client


def get_settings(request: Request) -> ProxySettings:
    """Return the settings the application was created with."""
    return request.app.state.settings


# Type aliases for injecting dependencies via FastAPI Depends().
# Usage in route handlers:
#   async def my_route(client: ClientDep, session: AuthedSession):
ClientDep = Annotated[Eg4Client, Depends(get_eg4_client)]
SettingsDep = Annotated[ProxySettings, Depends(get_settings)]
AnySession = Annotated[SessionContext, Depends(get_session)]
AuthedSession = Annotated[SessionContext, Depends(require_session)]
DeviceSession = Annotated[SessionContext, Depends(require_device)]


async def read_body(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object or form fields.

    An empty body reads as an empty dict.

    Raises:
        HTTPException: 400 if the body is not a JSON object.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items()}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body") from None
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return body
