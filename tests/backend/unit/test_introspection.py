"""
Unit tests for core.introspection module.
Tests flattening of routing trees into METHOD /path lines.
"""
from fastapi import APIRouter, FastAPI
from starlette.responses import PlainTextResponse
from starlette.routing import BaseRoute, Host, Mount, Route, Router, WebSocketRoute

from staff_portal.core.introspection import introspect, join_path, split_path


async def _endpoint(request):
    return PlainTextResponse("ok")


async def _api_endpoint():
    return {}


async def _ws_endpoint(websocket):
    await websocket.close()


async def _raw_asgi(scope, receive, send):
    pass


def _bare_app() -> FastAPI:
    # No /docs, /redoc or /openapi.json routes
    return FastAPI(openapi_url=None, docs_url=None, redoc_url=None)


class TestJoinPath:
    """Tests for URL segment handling."""

    def test_join_collapses_slashes(self):
        assert join_path("/api", "widgets/") == "/api/widgets"
        assert join_path("/api/", "/widgets") == "/api/widgets"
        assert join_path("api", "a//b") == "/api/a/b"

    def test_join_empty_is_root(self):
        assert join_path() == "/"
        assert join_path("", "/") == "/"

    def test_split_keeps_parameters(self):
        assert split_path("/items/{item_id}/") == ("items", "{item_id}")


class TestIntrospect:
    """Tests for the routing tree walk."""

    def test_literal_routes_only(self):
        """A dispatcher with one literal route lists exactly that route."""
        router = APIRouter()

        @router.get("/list")
        async def list_widgets():
            return []

        app = _bare_app()
        app.include_router(router, prefix="/api/widgets")

        assert introspect(app) == ["GET /api/widgets/list"]

    def test_route_with_several_methods(self):
        router = APIRouter()
        router.add_api_route("/items", _api_endpoint, methods=["GET", "POST", "DELETE"])

        assert introspect(router) == ["DELETE /items", "GET /items", "POST /items"]

    def test_head_is_only_listed_without_get(self):
        router = Router(routes=[
            Route("/page", _endpoint),
            Route("/ready", _endpoint, methods=["HEAD"]),
        ])

        assert introspect(router) == ["GET /page", "HEAD /ready"]

    def test_nested_mounts_accumulate_prefix(self):
        router = Router(routes=[
            Mount("/admin", routes=[
                Route("/users", _endpoint, methods=["GET", "POST"]),
                Mount("/deep/", routes=[Route("/x", _endpoint)]),
            ]),
            Route("/", _endpoint),
        ])

        assert introspect(router) == [
            "GET /",
            "GET /admin/deep/x",
            "GET /admin/users",
            "POST /admin/users",
        ]

    def test_mounted_sub_application(self):
        sub = _bare_app()

        @sub.get("/status")
        async def status():
            return {}

        app = _bare_app()
        app.mount("/sub", sub)

        assert introspect(app) == ["GET /sub/status"]

    def test_path_parameters_are_kept_verbatim(self):
        router = APIRouter()
        router.add_api_route("/items/{item_id}", _api_endpoint, methods=["GET"])
        router.add_api_route("/files/{path:path}", _api_endpoint, methods=["GET"])

        assert introspect(router) == ["GET /files/{path:path}", "GET /items/{item_id}"]

    def test_duplicates_are_removed(self):
        router = Router(routes=[
            Route("/same", _endpoint),
            Route("/same", _endpoint, methods=["GET", "HEAD"]),
            Mount("/", routes=[Route("/same", _endpoint)]),
        ])

        assert introspect(router) == ["GET /same"]

    def test_trailing_slash_is_kept(self):
        router = Router(routes=[
            Route("/same", _endpoint),
            Route("/same/", _endpoint),
            Mount("/admin", routes=[Route("/", _endpoint)]),
        ])

        assert introspect(router) == ["GET /admin/", "GET /same", "GET /same/"]

    def test_included_router_index_keeps_slash(self):
        router = APIRouter()
        router.add_api_route("/", _api_endpoint, methods=["GET"])
        router.add_api_route("", _api_endpoint, methods=["POST"])

        app = _bare_app()
        app.include_router(router, prefix="/api/ping")

        assert introspect(app) == ["GET /api/ping/", "POST /api/ping"]

    def test_nested_includes_accumulate_prefix(self):
        inner = APIRouter()
        inner.add_api_route("/list", _api_endpoint, methods=["GET"])
        inner.add_api_websocket_route("/live", _ws_endpoint)
        outer = APIRouter()
        outer.add_api_route("/status", _api_endpoint, methods=["GET"])
        outer.include_router(inner, prefix="/widgets")

        app = _bare_app()
        app.include_router(outer, prefix="/api")
        app.add_api_route("/healthz", _api_endpoint, methods=["GET"])

        assert introspect(app) == [
            "GET /api/status",
            "GET /api/widgets/list",
            "GET /healthz",
            "WS /api/widgets/live",
        ]

    def test_websocket_routes(self):
        router = Router(routes=[
            Mount("/rt", routes=[WebSocketRoute("/chat", _ws_endpoint)]),
        ])

        assert introspect(router) == ["WS /rt/chat"]

    def test_mount_without_routing_table(self):
        router = Router(routes=[Mount("/static", app=_raw_asgi)])

        assert introspect(router) == ["ANY /static"]

    def test_unknown_nodes_degrade_to_marker(self):
        class Custom(BaseRoute):
            pass

        router = Router(routes=[
            Host("api.example.com", app=Router(routes=[Route("/x", _endpoint)])),
            Route("/ok", _endpoint),
        ])
        router.routes.append(Custom())

        assert introspect(router) == ["<complex:Custom>", "<complex:Host>", "GET /ok"]

    def test_object_without_routes(self):
        assert introspect(object()) == []
        assert introspect(_bare_app()) == []
