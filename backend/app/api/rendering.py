"""
Server-side rendering helpers for the admin pages.

Every rendered page carries an anti-forgery token so its forms can post.
"""
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from app.auth.csrf import get_or_create_csrf_token
from app.config import settings

templates_dir = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))


def banner(is_success: bool, message: str) -> Dict[str, Any]:
    """Context for the success/error banner shown above a form."""
    return {"is_response": True, "is_success": is_success, "message": message}


def render(
    request: Request,
    name: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
):
    """Render a template, issuing an anti-forgery cookie when the client has none."""
    token, is_new = get_or_create_csrf_token(request)
    page_context = {
        "app_name": settings.app_name,
        "csrf_token": token,
        "is_response": False,
        **(context or {}),
    }
    response = templates.TemplateResponse(request, name, page_context, status_code=status_code)
    if is_new:
        response.set_cookie(
            settings.csrf_cookie_name,
            token,
            httponly=True,
            samesite="strict",
            secure=settings.environment == "production",
        )
    return response
