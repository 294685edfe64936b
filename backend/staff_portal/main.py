# staff_portal/main.py
import asyncio
import importlib
import logging

from staff_portal.auth.instance import AuthConfig
from staff_portal.config import settings
from staff_portal.core.portal import Core, CoreOptions
from staff_portal.core.registry import ModuleFactory

logger = logging.getLogger("uvicorn.error")

def load_factory(reference: str) -> ModuleFactory:
    """
    Resolve a "package.module:callable" reference to a module factory.

    Raises:
        ValueError: Reference is not in "module:callable" form
        ImportError: Module cannot be imported
        AttributeError: Module has no such attribute
        TypeError: Attribute is not callable
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f'Module reference "{reference}" must look like "package.module:factory"')
    factory = getattr(importlib.import_module(module_name), attr)
    if not callable(factory):
        raise TypeError(f'Module reference "{reference}" is not callable')
    return factory

def build_core() -> Core:
    """Build the Core from environment settings."""
    return Core(CoreOptions(
        modules=[load_factory(ref) for ref in settings.modules],
        port=settings.port,
        host=settings.host,
        app_name=settings.APP_NAME,
        cors_origins=settings.CORS_ORIGINS,
        auth=AuthConfig(
            access_token_secret=settings.access_token_secret,
            refresh_token_secret=settings.refresh_token_secret,
            access_token_expire_minutes=settings.access_token_expire_minutes,
            token_set_name=settings.token_set_name,
        ),
        kv_url=settings.redis_url,
        database_url=settings.database_url,
        admin_key=settings.admin_key,
        auth_prefix=settings.auth_prefix,
        realtime_enabled=settings.realtime_enabled,
        realtime_port=settings.realtime_port,
        log_level=settings.log_level,
    ))

core = build_core()
app = core.app  # for `uvicorn staff_portal.main:app`

if not settings.admin_key:
    logger.warning("[config] ADMIN_KEY not set -> GET /info is disabled")

@app.get("/healthz", include_in_schema=False)
def healthz():
    return {"ok": True}

def run() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    asyncio.run(core.serve())

if __name__ == "__main__":
    run()
