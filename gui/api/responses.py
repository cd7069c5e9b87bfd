"""Response Encoding — typed UIResponse → HTTP status, headers, cookies, HTML.

Invariants:
    - A UIResponse with a template renders it as text/html; otherwise the body
      is empty (redirects, 204-style answers)
    - Cookies are HttpOnly and SameSite=Lax; Secure follows the setting
    - Cookie deletion is expressed as a CookieSpec with delete=True
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fastapi.templating import Jinja2Templates
from starlette.requests import Request
from starlette.responses import Response

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@dataclass
class CookieSpec:
    name: str
    value: str = field(default="", repr=False)
    delete: bool = False


@dataclass
class UIResponse:
    code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    cookies: list[CookieSpec] = field(default_factory=list)
    template: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def empty(self) -> bool:
        return self.template is None


def redirect(location: str, code: int = 303, cookies: list[CookieSpec] | None = None) -> UIResponse:
    """Empty-body redirect (303 See Other after a form POST)."""
    return UIResponse(code=code, headers={"Location": location}, cookies=cookies or [])


def page(template: str, **context: Any) -> UIResponse:
    return UIResponse(template=template, context=context)


def encode_response(request: Request, res: UIResponse, secure_cookies: bool = False) -> Response:
    """Write a UIResponse onto a Starlette response."""
    if res.empty:
        response = Response(status_code=res.code)
    else:
        response = templates.TemplateResponse(
            request, res.template, res.context, status_code=res.code,
        )
    for key, value in res.headers.items():
        response.headers[key] = value
    for cookie in res.cookies:
        if cookie.delete:
            response.delete_cookie(
                cookie.name, path="/", secure=secure_cookies,
                httponly=True, samesite="lax",
            )
        else:
            response.set_cookie(
                cookie.name, cookie.value, path="/", secure=secure_cookies,
                httponly=True, samesite="lax",
            )
    return response
