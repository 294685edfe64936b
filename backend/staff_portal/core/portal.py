# staff_portal/core/portal.py
"""
The Core: one object that owns the HTTP app and everything mounted on it.

Construction is synchronous and does all the wiring (auth, modules, admin
endpoint, real-time namespaces), so a broken module configuration stops the
process before any listener is opened. Connections to the stores are made
at startup, from the app lifespan.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from staff_portal.api.routers.info import router as info_router
from staff_portal.auth.bridge import AuthBridge
from staff_portal.auth.instance import AuthConfig, AuthInstance, send_data
from staff_portal.core.bootstrap import ensure_default_user
from staff_portal.core.db import close_db, init_db
from staff_portal.core.introspection import join_path
from staff_portal.core.kv import TokenSet, close_kv, connect_kv, create_kv_client
from staff_portal.core.logger import LogFunction, default_logger
from staff_portal.core.pubsub import NamespaceServer
from staff_portal.core.registry import AuthHelpers, ModuleContext, ModuleFactory, ModuleRegistry

AUTH_MODULE_NAME = "Auth"


class CoreOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    auth: AuthConfig
    modules: list[ModuleFactory] = Field(default_factory=list)
    port: int = 8000
    host: str = "0.0.0.0"
    logger: LogFunction = default_logger
    app_name: str = "Staff Portal Core"
    cors_origins: list[str] = Field(default_factory=list)

    # Key/value store: either connection options or a ready client
    kv_url: str = "redis://127.0.0.1:6379/0"
    kv_options: dict[str, Any] = Field(default_factory=dict)
    kv_client: Any = None

    # None keeps the URL from staff_portal.core.db
    database_url: str | None = None

    admin_key: str = ""
    auth_prefix: str = "/auth"

    realtime_enabled: bool = True
    realtime_port: int | None = None

    log_level: str = "info"


class Core:
    def __init__(self, options: CoreOptions):
        self.options = options
        self.logger = options.logger

        self.app = FastAPI(title=options.app_name, lifespan=self._lifespan)
        self.app.state.portal = self
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=options.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self.kv = options.kv_client if options.kv_client is not None else create_kv_client(
            options.kv_url, **options.kv_options
        )
        self.tokens = TokenSet(options.auth.token_set_name, self.kv)

        self.auth = AuthInstance(options.auth)
        self.auth.logger(self.logger)
        AuthBridge(self.tokens, self.logger).install(self.auth)

        self.realtime = NamespaceServer() if options.realtime_enabled else None

        self.registry = ModuleRegistry(
            self.app,
            ModuleContext(
                auth=AuthHelpers(send_data=send_data, validate=self.auth.validate),
                logger=self.logger,
                create_namespace=self.realtime.create_namespace if self.realtime else None,
            ),
        )
        self.registry.reserve(AUTH_MODULE_NAME, options.auth_prefix)
        self.app.include_router(self.auth.router, prefix=join_path(options.auth_prefix))

        for factory in options.modules:
            self.registry.register(factory)

        self.app.include_router(info_router)

        # Real-time namespaces share the HTTP app unless a port of their own is set
        self.realtime_app: FastAPI | None = None
        if self.realtime is not None:
            if options.realtime_port and options.realtime_port != options.port:
                self.realtime_app = FastAPI(title=f"{options.app_name} realtime")
                self.realtime_app.include_router(self.realtime.router)
            else:
                self.app.include_router(self.realtime.router)

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        await self.startup()
        try:
            yield
        finally:
            await self.shutdown()

    async def startup(self) -> None:
        """Connect the stores in order, logging each step."""
        self.logger("info", f"Staff portal instance on port {self.options.port}!")

        await connect_kv(self.kv)
        self.logger("info", f'Key/value store connected (token set "{self.tokens.name}")')

        await init_db(self.options.database_url)
        self.logger("info", "Document store connected")
        await ensure_default_user(self.logger)

        if self.realtime is not None:
            where = f"port {self.options.realtime_port}" if self.realtime_app else "the HTTP port"
            self.logger("info", f"Realtime namespaces on {where}: {', '.join(self.realtime.paths) or '-'}")

    async def shutdown(self) -> None:
        await close_db()
        await close_kv(self.kv)
        self.logger("info", "Staff portal stopped")

    async def serve(self) -> None:
        """Run the HTTP listener (and the real-time listener when it has its own port)."""
        servers = [
            uvicorn.Server(uvicorn.Config(
                self.app, host=self.options.host, port=self.options.port, log_level=self.options.log_level,
            ))
        ]
        if self.realtime_app is not None:
            servers.append(uvicorn.Server(uvicorn.Config(
                self.realtime_app, host=self.options.host, port=self.options.realtime_port,
                log_level=self.options.log_level, lifespan="off",
            )))
        await asyncio.gather(*(server.serve() for server in servers))
