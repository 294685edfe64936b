# staff_portal/api/deps.py
from fastapi import Request

async def get_core(request: Request):
    """
    FastAPI dependency returning the Core that owns the current app.

    The Core stores itself on ``app.state.portal`` when it builds the app,
    so core-level routes can reach the module registry without globals.
    """
    return request.app.state.portal
