# staff_portal/auth/bridge.py
"""
Auth bridge.
Connects the auth instance's storage hooks to the user collection and the
token set, and installs the register/login policies.

Every hook reports failure through its return value: backend exceptions are
logged and turned into ``(True, ...)`` so nothing escapes into the request
handlers.
"""
from typing import Any

from staff_portal.auth.instance import AuthInstance
from staff_portal.core.kv import TokenSet
from staff_portal.core.logger import LogFunction
from staff_portal.models.user import User


class AuthBridge:
    def __init__(self, tokens: TokenSet, logger: LogFunction):
        self.tokens = tokens
        self.log = logger

    def install(self, auth: AuthInstance) -> None:
        auth.use("get_user_by_mail", self.get_user_by_mail)
        auth.use("get_user_by_name", self.get_user_by_name)
        auth.use("store_user", self.store_user)
        auth.use("check_token", self.check_token)
        auth.use("store_token", self.store_token)
        auth.use("delete_token", self.delete_token)
        auth.intercept("register", self.intercept_register)
        auth.intercept("login", self.intercept_login)

    def _failed(self, hook: str, exc: Exception) -> None:
        self.log("error", f"{hook} failed: {exc!r}")

    # -------- user collection --------
    async def get_user_by_mail(self, email: str) -> tuple[bool, User | None]:
        try:
            return False, await User.get_or_none(email=email)
        except Exception as e:
            self._failed("get_user_by_mail", e)
            return True, None

    async def get_user_by_name(self, username: str) -> tuple[bool, User | None]:
        try:
            return False, await User.get_or_none(username=username)
        except Exception as e:
            self._failed("get_user_by_name", e)
            return True, None

    async def store_user(self, fields: dict[str, Any]) -> tuple[bool]:
        try:
            await User.create(
                email=fields["email"],
                username=fields["username"],
                hashed_password=fields["hashed_password"],
            )
            return (False,)
        except Exception as e:
            self._failed("store_user", e)
            return (True,)

    # -------- token set --------
    async def check_token(self, token: str) -> tuple[bool, bool | None]:
        try:
            return False, await self.tokens.contains(token)
        except Exception as e:
            self._failed("check_token", e)
            return True, None

    async def store_token(self, token: str) -> tuple[bool]:
        try:
            await self.tokens.add(token)
            return (False,)
        except Exception as e:
            self._failed("store_token", e)
            return (True,)

    async def delete_token(self, token: str) -> tuple[bool]:
        try:
            await self.tokens.discard(token)
            return (False,)
        except Exception as e:
            self._failed("delete_token", e)
            return (True,)

    # -------- policies --------
    async def intercept_register(self, _payload: Any) -> tuple[bool]:
        # Self-service registration is switched off; accounts are provisioned.
        return (True,)

    async def intercept_login(self, user_id: str) -> tuple[bool]:
        try:
            user = await User.get_or_none(id=user_id)
        except Exception as e:
            self._failed("login policy", e)
            return (True,)
        if user is None or not user.active:
            return (True,)
        return (False,)
