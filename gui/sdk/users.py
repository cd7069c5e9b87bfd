"""Users Client — accounts, tokens and passwords on the users service."""

import json

from gui.core.errors import SDKErrorKind
from gui.sdk.models import Page, PageMetadata, Token, User, with_query_params
from gui.sdk.transport import ResourceClient

USERS_ENDPOINT = "users"
ISSUE_TOKEN_ENDPOINT = "users/tokens/issue"
REFRESH_TOKEN_ENDPOINT = "users/tokens/refresh"
PASSWORD_RESET_REQUEST_ENDPOINT = "password/reset-request"
PASSWORD_RESET_ENDPOINT = "password/reset"


class UsersClient(ResourceClient):
    """Implements UserClient against the users service."""

    def __init__(self, transport, base_url: str, host_url: str = ""):
        super().__init__(transport, base_url)
        self._host_url = host_url

    async def create_user(self, user: User, token: str) -> User:
        _, body = await self._call(
            "POST", self._url(USERS_ENDPOINT), token,
            SDKErrorKind.CREATION_FAILED, body=user.to_body(), expected=(201,),
        )
        return User.model_validate_json(body)

    async def user(self, user_id: str, token: str) -> User:
        _, body = await self._call(
            "GET", self._url(USERS_ENDPOINT, user_id), token,
            SDKErrorKind.FETCH_FAILED,
        )
        return User.model_validate_json(body)

    async def users(self, pm: PageMetadata, token: str) -> Page[User]:
        url = with_query_params(self._base_url, USERS_ENDPOINT, pm)
        _, body = await self._call("GET", url, token, SDKErrorKind.LIST_FAILED)
        return Page[User].from_body(body, "users")

    async def user_profile(self, token: str) -> User:
        _, body = await self._call(
            "GET", self._url(USERS_ENDPOINT, "profile"), token,
            SDKErrorKind.FETCH_FAILED,
        )
        return User.model_validate_json(body)

    async def update_user(self, user: User, token: str) -> User:
        payload = User(name=user.name, metadata=user.metadata)
        return await self._patch(user.id, "", payload.to_body(), token)

    async def update_user_tags(self, user: User, token: str) -> User:
        payload = json.dumps({"tags": user.tags or []}).encode()
        return await self._patch(user.id, "tags", payload, token)

    async def update_user_identity(self, user: User, token: str) -> User:
        identity = user.credentials.identity if user.credentials else ""
        payload = json.dumps({"identity": identity}).encode()
        return await self._patch(user.id, "identity", payload, token)

    async def update_user_owner(self, user: User, token: str) -> User:
        payload = json.dumps({"owner": user.owner or ""}).encode()
        return await self._patch(user.id, "owner", payload, token)

    async def update_password(self, old_secret: str, new_secret: str, token: str) -> User:
        payload = json.dumps(
            {"old_secret": old_secret, "new_secret": new_secret},
        ).encode()
        _, body = await self._call(
            "PATCH", self._url(USERS_ENDPOINT, "secret"), token,
            SDKErrorKind.UPDATE_FAILED, body=payload,
        )
        return User.model_validate_json(body)

    async def enable_user(self, user_id: str, token: str) -> User:
        _, body = await self._call(
            "POST", self._url(USERS_ENDPOINT, user_id, "enable"), token,
            SDKErrorKind.ENABLE_FAILED,
        )
        return User.model_validate_json(body)

    async def disable_user(self, user_id: str, token: str) -> User:
        _, body = await self._call(
            "POST", self._url(USERS_ENDPOINT, user_id, "disable"), token,
            SDKErrorKind.DISABLE_FAILED,
        )
        return User.model_validate_json(body)

    async def create_token(self, user: User) -> Token:
        creds = user.credentials
        payload = json.dumps({
            "identity": creds.identity if creds else "",
            "secret": creds.secret if creds else "",
        }).encode()
        _, body = await self._call(
            "POST", self._url(ISSUE_TOKEN_ENDPOINT), "",
            SDKErrorKind.INVALID_TOKEN, body=payload, expected=(201,),
        )
        return Token.model_validate_json(body)

    async def refresh_token(self, refresh_token: str) -> Token:
        _, body = await self._call(
            "POST", self._url(REFRESH_TOKEN_ENDPOINT), refresh_token,
            SDKErrorKind.INVALID_TOKEN, expected=(201,),
        )
        return Token.model_validate_json(body)

    async def reset_password_request(self, email: str) -> None:
        await self._call(
            "POST", self._url(PASSWORD_RESET_REQUEST_ENDPOINT), "",
            SDKErrorKind.CREATION_FAILED,
            body=json.dumps({"email": email, "host": self._host_url}).encode(),
            headers={"Referer": self._host_url},
            expected=(201,),
        )

    async def reset_password(self, password: str, confirm_password: str, token: str) -> None:
        payload = json.dumps({
            "token": token,
            "password": password,
            "confirm_password": confirm_password,
        }).encode()
        await self._call(
            "PUT", self._url(PASSWORD_RESET_ENDPOINT), "",
            SDKErrorKind.UPDATE_FAILED, body=payload, expected=(201,),
        )

    async def _patch(self, user_id: str | None, field: str, payload: bytes, token: str) -> User:
        parts = [USERS_ENDPOINT, user_id or ""]
        if field:
            parts.append(field)
        _, body = await self._call(
            "PATCH", self._url(*parts), token, SDKErrorKind.UPDATE_FAILED,
            body=payload,
        )
        return User.model_validate_json(body)
