"""Optional HTTP Basic authentication gate."""

from __future__ import annotations

import binascii
import secrets
from base64 import b64decode

from fastapi import HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param

from arpwatch_exporter.config import Settings

REALM = "Arpwatch Exporter"


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": f'Basic realm="{REALM}"'},
    )


def basic_credentials(request: Request) -> tuple[bytes, bytes] | None:
    """Return the raw ``(username, password)`` bytes of a Basic header, or ``None``.

    Credentials are kept as bytes so UTF-8 usernames and passwords compare
    exactly as sent.
    """

    scheme, param = get_authorization_scheme_param(request.headers.get("Authorization"))
    if scheme.lower() != "basic" or not param:
        return None
    try:
        decoded = b64decode(param, validate=True)
    except (binascii.Error, ValueError):
        return None
    username, sep, password = decoded.partition(b":")
    if not sep:
        return None
    return username, password


async def require_basic_auth(request: Request) -> None:
    """Reject the request unless it carries the configured credentials.

    The gate is a no-op when either the username or the password is unset.
    """

    settings: Settings = request.app.state.settings  # type: ignore[attr-defined]
    if not settings.auth_enabled:
        return

    credentials = basic_credentials(request)
    if credentials is None:
        raise _unauthorized()

    username, password = credentials
    # Evaluate both comparisons so timing does not reveal which one failed.
    username_ok = secrets.compare_digest(username, settings.auth_username.encode("utf-8"))
    password_ok = secrets.compare_digest(password, settings.auth_password.encode("utf-8"))
    if not (username_ok and password_ok):
        raise _unauthorized()
