# staff_portal/core/introspection.py
"""
Route introspection.
Flattens the mounted routing tree of the app into ``METHOD /path`` lines for
the admin info endpoint.

Paths come from the literal strings each route, mount and router include was
registered with, so parameters show up in their declared ``{name}`` form and
a declared trailing slash is kept. Nodes that are neither mounts, routers nor
routes are reported as ``<complex:TypeName>`` instead of failing the whole
listing.
"""
from collections.abc import Iterable
from typing import Any

from starlette.routing import BaseRoute, Mount, Route, WebSocketRoute


def split_path(path: str) -> tuple[str, ...]:
    """Split a URL path into its non-empty segments."""
    return tuple(segment for segment in (path or "").split("/") if segment)


def join_path(*parts: str) -> str:
    """
    Join URL fragments into one normalized absolute path.
    Used for mount prefixes, which never carry a trailing slash.

    Example: ``join_path("/api", "widgets/")`` -> ``"/api/widgets"``
    """
    segments: list[str] = []
    for part in parts:
        segments.extend(split_path(part))
    return "/" + "/".join(segments)


def _append(prefix: str, path: str) -> str:
    # Literal concatenation, the same way the router builds its matchers
    if path and not path.startswith("/"):
        path = "/" + path
    return prefix.rstrip("/") + path


def _child_routes(node: Any) -> list[BaseRoute]:
    routes = getattr(node, "routes", None)
    if isinstance(routes, Iterable) and not isinstance(routes, (str, bytes)):
        return list(routes)
    return []


def _included_router(node: Any) -> tuple[Any, str] | None:
    """
    ``(router, prefix)`` for a router added with ``include_router`` and kept
    as its own node (FastAPI 0.120+), else None.
    """
    router = getattr(node, "original_router", None)
    context = getattr(node, "include_context", None)
    prefix = getattr(context, "prefix", None)
    if router is None or not isinstance(prefix, str):
        return None
    return router, prefix


def _methods(route: Route) -> list[str]:
    methods = set(route.methods or {"ANY"})
    # Starlette adds HEAD to every GET route
    if "GET" in methods:
        methods.discard("HEAD")
    return sorted(methods)


def introspect(root: Any) -> list[str]:
    """
    List every endpoint reachable from ``root``.

    Args:
        root: FastAPI/Starlette app, Starlette ``Router`` or ``APIRouter``

    Returns:
        Sorted, de-duplicated ``METHOD /path`` strings. WebSocket routes use
        ``WS`` as method; mounted apps without a routing table use ``ANY``.
    """
    endpoints: set[str] = set()
    # depth-first; each entry carries the path prefix accumulated so far
    stack: list[tuple[Any, str]] = [(route, "") for route in reversed(_child_routes(root))]
    while stack:
        node, prefix = stack.pop()
        included = _included_router(node)
        if included is not None:
            router, include_prefix = included
            nested = _append(prefix, include_prefix)
            stack.extend((child, nested) for child in reversed(_child_routes(router)))
        elif isinstance(node, Mount):
            nested = _append(prefix, node.path)
            children = _child_routes(node)
            if children:
                stack.extend((child, nested) for child in reversed(children))
            else:
                endpoints.add(f"ANY {nested or '/'}")
        elif isinstance(node, Route):
            path = _append(prefix, node.path) or "/"
            for method in _methods(node):
                endpoints.add(f"{method} {path}")
        elif isinstance(node, WebSocketRoute):
            endpoints.add(f"WS {_append(prefix, node.path) or '/'}")
        else:
            endpoints.add(f"<complex:{type(node).__name__}>")
    return sorted(endpoints)
