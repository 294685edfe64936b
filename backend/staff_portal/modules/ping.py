# staff_portal/modules/ping.py
"""
Ping module.
Smallest useful feature module; doubles as a template for new ones.

Routes (mounted at /api/ping):
    GET  /           public liveness answer
    GET  /whoami     claims of the calling user (requires a bearer token)
    POST /broadcast  emit a message on the /ping namespace (requires a bearer token)
"""
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from staff_portal.core.registry import ModuleContext, ModuleDescriptor

class BroadcastIn(BaseModel):
    message: str

def create_module(ctx: ModuleContext) -> ModuleDescriptor:
    router = APIRouter(tags=["ping"])
    send_data = ctx.auth.send_data
    namespace = ctx.create_namespace("/ping") if ctx.create_namespace else None

    if namespace is not None:
        async def on_ping(ws, data):
            await ws.send_json({"event": "pong", "data": data})

        namespace.on("ping", on_ping)

    @router.get("/")
    async def ping():
        return send_data(status.HTTP_200_OK, {"pong": True})

    @router.get("/whoami")
    async def whoami(claims: dict = Depends(ctx.auth.validate)):
        return send_data(status.HTTP_200_OK, {"userId": claims["sub"]})

    @router.post("/broadcast")
    async def broadcast(body: BroadcastIn, claims: dict = Depends(ctx.auth.validate)):
        if namespace is None:
            return send_data(status.HTTP_503_SERVICE_UNAVAILABLE, {"err": "Realtime server is disabled"})
        delivered = await namespace.emit("message", {"from": claims["sub"], "message": body.message})
        ctx.logger("debug", f"[ping] broadcast delivered to {delivered} socket(s)")
        return send_data(status.HTTP_200_OK, {"delivered": delivered})

    return ModuleDescriptor(name="Ping", path="ping", router=router)
