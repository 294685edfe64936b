# staff_portal/auth/instance.py
"""
Auth instance: the HTTP side of authentication.

Owns the register/login/token/logout endpoints and the ``validate``
dependency, but stores nothing itself. Every read or write goes through a
named hook registered with ``use``, and the register/login flows can be
vetoed by policies registered with ``intercept``.

Hook contract (all hooks are async):
    get_user_by_mail(email)  -> (err, user | None)
    get_user_by_name(name)   -> (err, user | None)
    store_user(fields)       -> (err,)
    check_token(token)       -> (err, bool | None)
    store_token(token)       -> (err,)
    delete_token(token)      -> (err,)

Policies return ``(blocked,)``.
"""
from typing import Any, Awaitable, Callable

import jwt
from fastapi import APIRouter, Header, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from staff_portal.core.logger import LogFunction, default_logger
from staff_portal.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from staff_portal.schemas.auth import AccessTokenOut, LoginIn, RegisterIn, TokenIn, TokenPairOut
from staff_portal.schemas.info import ErrorOut

HOOK_NAMES = (
    "get_user_by_mail",
    "get_user_by_name",
    "store_user",
    "check_token",
    "store_token",
    "delete_token",
)
INTERCEPT_EVENTS = ("register", "login")

Hook = Callable[..., Awaitable[tuple]]
Policy = Callable[[Any], Awaitable[tuple]]


class AuthConfig(BaseModel):
    access_token_secret: str
    refresh_token_secret: str
    access_token_expire_minutes: int = 15
    token_set_name: str = "tokens"


def send_data(status_code: int, data: Any = None) -> JSONResponse:
    """JSON response helper shared with modules."""
    return JSONResponse(status_code=status_code, content=data)


def _error(status_code: int, message: str) -> JSONResponse:
    return send_data(status_code, {"err": message})


def _server_error() -> JSONResponse:
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


class AuthInstance:
    def __init__(self, config: AuthConfig):
        self.config = config
        self._hooks: dict[str, Hook] = {}
        self._policies: dict[str, Policy] = {}
        self._log: LogFunction = default_logger

        self.router = APIRouter(tags=["auth"], responses={500: {"model": ErrorOut}})
        self.router.add_api_route(
            "/register", self.register, methods=["POST"], status_code=status.HTTP_201_CREATED,
            responses={403: {"model": ErrorOut}, 409: {"model": ErrorOut}},
        )
        self.router.add_api_route(
            "/login", self.login, methods=["POST"], response_model=TokenPairOut,
            responses={401: {"model": ErrorOut}, 403: {"model": ErrorOut}},
        )
        self.router.add_api_route(
            "/token", self.refresh, methods=["POST"], response_model=AccessTokenOut,
            responses={403: {"model": ErrorOut}},
        )
        self.router.add_api_route("/logout", self.logout, methods=["POST"])

    # -------- configuration --------
    def use(self, name: str, hook: Hook) -> None:
        if name not in HOOK_NAMES:
            raise ValueError(f'Unknown auth hook "{name}"')
        self._hooks[name] = hook

    def intercept(self, event: str, policy: Policy) -> None:
        if event not in INTERCEPT_EVENTS:
            raise ValueError(f'Unknown auth event "{event}"')
        self._policies[event] = policy

    def logger(self, log: LogFunction) -> None:
        self._log = log

    async def _call(self, name: str, *args: Any) -> tuple:
        hook = self._hooks.get(name)
        if hook is None:
            self._log("error", f'Auth hook "{name}" is not registered')
            return (True, None)
        return await hook(*args)

    async def _blocked(self, event: str, payload: Any) -> bool:
        policy = self._policies.get(event)
        if policy is None:
            return False
        result = await policy(payload)
        return bool(result[0])

    # -------- request validation --------
    async def validate(self, authorization: str | None = Header(default=None)) -> dict:
        """
        FastAPI dependency guarding module routes.

        Returns:
            dict: Decoded access token claims (``sub`` is the user id)

        Raises:
            HTTPException (401): AUTH_REQUIRED when no bearer token is sent
            HTTPException (401): AUTH_INVALID_TOKEN when it is invalid or expired
        """
        token = None
        if authorization and authorization.lower().startswith("bearer "):
            token = authorization.split(" ", 1)[1].strip()
        if not token:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_REQUIRED")
        try:
            return decode_token(token, self.config.access_token_secret)
        except jwt.InvalidTokenError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_INVALID_TOKEN")

    # -------- endpoints --------
    async def register(self, body: RegisterIn):
        """
        Create a user account.

        Responses:
            201 on success
            403 when the register policy blocks the request
            409 when the email or username is taken
            500 when a storage hook fails
        """
        if await self._blocked("register", body.model_dump()):
            return _error(status.HTTP_403_FORBIDDEN, "Registration is disabled")

        err, existing = await self._call("get_user_by_mail", body.email)
        if err:
            return _server_error()
        if existing is not None:
            return _error(status.HTTP_409_CONFLICT, "Email already registered")

        err, existing = await self._call("get_user_by_name", body.username)
        if err:
            return _server_error()
        if existing is not None:
            return _error(status.HTTP_409_CONFLICT, "Username already exists")

        stored = await self._call("store_user", {
            "email": body.email,
            "username": body.username,
            "hashed_password": hash_password(body.password),
        })
        if stored[0]:
            return _server_error()
        self._log("info", f"Registered user {body.username}")
        return send_data(status.HTTP_201_CREATED, {"registered": True})

    async def login(self, body: LoginIn):
        """
        Exchange credentials for an access/refresh token pair.

        The refresh token is stored in the token set and stays valid until
        logout removes it.
        """
        hook = "get_user_by_mail" if "@" in body.login else "get_user_by_name"
        err, user = await self._call(hook, body.login)
        if err:
            return _server_error()
        if user is None or not verify_password(body.password, user.hashed_password):
            return _error(status.HTTP_401_UNAUTHORIZED, "Invalid credentials")

        user_id = str(user.id)
        if await self._blocked("login", user_id):
            return _error(status.HTTP_403_FORBIDDEN, "Login is not permitted for this account")

        access_token = create_access_token(
            user_id, self.config.access_token_secret, self.config.access_token_expire_minutes
        )
        refresh_token = create_refresh_token(user_id, self.config.refresh_token_secret)
        stored = await self._call("store_token", refresh_token)
        if stored[0]:
            return _server_error()
        self._log("info", f"User {user_id} logged in")
        return send_data(status.HTTP_200_OK, {"accessToken": access_token, "refreshToken": refresh_token})

    async def refresh(self, body: TokenIn):
        """Issue a new access token for a refresh token that is still in the token set."""
        err, valid = await self._call("check_token", body.token)
        if err:
            return _server_error()
        if not valid:
            return _error(status.HTTP_403_FORBIDDEN, "Invalid refresh token")
        try:
            claims = decode_token(body.token, self.config.refresh_token_secret)
        except jwt.InvalidTokenError:
            return _error(status.HTTP_403_FORBIDDEN, "Invalid refresh token")
        access_token = create_access_token(
            claims["sub"], self.config.access_token_secret, self.config.access_token_expire_minutes
        )
        return send_data(status.HTTP_200_OK, {"accessToken": access_token})

    async def logout(self, body: TokenIn):
        """Revoke a refresh token. Unknown tokens are not an error."""
        deleted = await self._call("delete_token", body.token)
        if deleted[0]:
            return _server_error()
        return send_data(status.HTTP_200_OK, {"loggedOut": True})
