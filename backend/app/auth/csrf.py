"""
Anti-forgery tokens for the admin HTML forms (double-submit cookie).

Pages that render a form put a random token both in a cookie and in a
hidden "csrf_token" field. POST handlers accept the request only when the
two values match.
"""
import secrets
from typing import Optional

from fastapi import Form, HTTPException, Request, status

from app.config import settings

CSRF_FIELD_NAME = "csrf_token"


def get_or_create_csrf_token(request: Request) -> tuple[str, bool]:
    """
    Return the request's anti-forgery token and whether it is new.

    A new token must be set as a cookie on the response.
    """
    token = request.cookies.get(settings.csrf_cookie_name)
    if token:
        return token, False
    return secrets.token_urlsafe(32), True


async def verify_csrf_token(
    request: Request,
    csrf_token: Optional[str] = Form(None),
) -> None:
    """Dependency rejecting form posts whose token does not match the cookie."""
    cookie_token = request.cookies.get(settings.csrf_cookie_name)
    if not cookie_token or not csrf_token or not secrets.compare_digest(cookie_token, csrf_token):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or missing anti-forgery token"
        )
