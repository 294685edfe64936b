# staff_portal/core/registry.py
"""
Module registry.
Feature modules are plain factory functions. Each one receives a
``ModuleContext`` with the capabilities it may use and returns a
``ModuleDescriptor``; the registry mounts the descriptor's router under
``/api/<path>``.
"""
from dataclasses import dataclass
from typing import Any, Callable, Optional

from fastapi import APIRouter, FastAPI

from staff_portal.core.introspection import join_path
from staff_portal.core.logger import LogFunction
from staff_portal.core.pubsub import Namespace

API_PREFIX = "/api"


class DuplicateModuleError(RuntimeError):
    """Raised at startup when a module name or mount path is already taken."""


@dataclass(frozen=True)
class ModuleDescriptor:
    name: str
    path: str
    router: APIRouter


@dataclass(frozen=True)
class AuthHelpers:
    send_data: Callable[..., Any]
    validate: Callable[..., Any]  # use as Depends(ctx.auth.validate)


@dataclass(frozen=True)
class ModuleContext:
    auth: AuthHelpers
    logger: LogFunction
    create_namespace: Optional[Callable[[str], Namespace]] = None


ModuleFactory = Callable[[ModuleContext], ModuleDescriptor]


class ModuleRegistry:
    def __init__(self, app: FastAPI, context: ModuleContext):
        self.app = app
        self.context = context
        self._names: list[str] = []
        self._paths: list[str] = []

    @property
    def names(self) -> list[str]:
        return list(self._names)

    @property
    def paths(self) -> list[str]:
        return list(self._paths)

    def reserve(self, name: str, mount_path: str) -> None:
        """Claim a name and mount path for a built-in module."""
        self._check(name, join_path(mount_path))
        self._names.append(name)
        self._paths.append(join_path(mount_path))

    def register(self, factory: ModuleFactory) -> ModuleDescriptor:
        """
        Build a module and mount its router.

        Raises:
            TypeError: The factory did not return a ModuleDescriptor
            DuplicateModuleError: Name or mount path already registered
        """
        module = factory(self.context)
        if not isinstance(module, ModuleDescriptor):
            raise TypeError(
                f"Module factory {getattr(factory, '__name__', factory)!r} "
                f"returned {type(module).__name__}, expected ModuleDescriptor"
            )
        mount_path = join_path(API_PREFIX, module.path)
        self._check(module.name, mount_path)

        self._names.append(module.name)
        self._paths.append(mount_path)
        self.app.include_router(module.router, prefix=mount_path)
        self.context.logger("info", f'Module "{module.name}" mounted at {mount_path}')
        return module

    def _check(self, name: str, mount_path: str) -> None:
        if name in self._names or mount_path in self._paths:
            raise DuplicateModuleError(
                f'A module with the path "{mount_path}" or the name "{name}" is already used!'
            )
