"""Session Handlers — dashboard, login, token refresh, logout, password, deleted.

Invariants:
    - Login and refresh set both `token` and `refresh_token` cookies
    - Any backend failure during login or refresh becomes LoginFailedError
      (→ 302 /login), never an error page
    - Logout clears both cookies without calling the backend
"""

import logging

from gui.api.requests import (
    EmptyRequest, ListRequest, LoginRequest, PasswordRequest, RefreshRequest,
    TokenRequest,
)
from gui.api.responses import CookieSpec, UIResponse, page, redirect
from gui.core.domain_types import REFRESH_TOKEN_COOKIE, TOKEN_COOKIE, ClientStatus
from gui.core.errors import LOGIN_PATH, LoginFailedError, SDKError
from gui.sdk.client import PlatformSDK
from gui.sdk.models import Credentials, PageMetadata, Token, User
from gui.services.handler_helpers import page_metadata, require

logger = logging.getLogger(__name__)


def _token_cookies(token: Token) -> list[CookieSpec]:
    return [
        CookieSpec(TOKEN_COOKIE, token.access_token),
        CookieSpec(REFRESH_TOKEN_COOKIE, token.refresh_token or ""),
    ]


async def index(sdk: PlatformSDK, req: TokenRequest) -> UIResponse:
    """Dashboard: profile plus entity totals."""
    count = PageMetadata(limit=1)
    profile = await sdk.users.user_profile(req.token)
    users = await sdk.users.users(count, req.token)
    things = await sdk.things.things(count, req.token)
    channels = await sdk.channels.channels(count, req.token)
    groups = await sdk.groups.groups(count, req.token)
    return page(
        "index.html",
        profile=profile,
        totals={
            "users": users.total,
            "things": things.total,
            "channels": channels.total,
            "groups": groups.total,
        },
    )


async def login_page(sdk: PlatformSDK, req: EmptyRequest) -> UIResponse:
    return page("login.html")


async def login(sdk: PlatformSDK, req: LoginRequest) -> UIResponse:
    if not req.identity or not req.secret:
        raise LoginFailedError()
    user = User(credentials=Credentials(identity=req.identity, secret=req.secret))
    try:
        token = await sdk.users.create_token(user)
    except SDKError as e:
        logger.info(f"Login rejected: {e.op_kind.value}", extra={"backend_status": e.status_code})
        raise LoginFailedError() from e
    return redirect("/", code=302, cookies=_token_cookies(token))


async def refresh_token(sdk: PlatformSDK, req: RefreshRequest) -> UIResponse:
    try:
        token = await sdk.users.refresh_token(req.refresh_token)
    except SDKError as e:
        logger.info("Token refresh rejected", extra={"backend_status": e.status_code})
        raise LoginFailedError() from e
    return redirect(req.ref, code=303, cookies=_token_cookies(token))


async def logout(sdk: PlatformSDK, req: EmptyRequest) -> UIResponse:
    return redirect(LOGIN_PATH, code=302, cookies=[
        CookieSpec(TOKEN_COOKIE, delete=True),
        CookieSpec(REFRESH_TOKEN_COOKIE, delete=True),
    ])


async def password_page(sdk: PlatformSDK, req: EmptyRequest) -> UIResponse:
    return page("password.html")


async def update_password(sdk: PlatformSDK, req: PasswordRequest) -> UIResponse:
    require(oldpass=req.old_password, newpass=req.new_password)
    await sdk.users.update_password(req.old_password, req.new_password, req.token)
    return redirect("/")


async def list_deleted(sdk: PlatformSDK, req: ListRequest) -> UIResponse:
    """Disabled users and things (soft-deleted clients)."""
    pm = page_metadata(req, status=ClientStatus.DISABLED.value)
    users = await sdk.users.users(pm, req.token)
    things = await sdk.things.things(pm, req.token)
    return page("deleted.html", users=users, things=things)
