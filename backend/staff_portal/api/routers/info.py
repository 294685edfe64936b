# staff_portal/api/routers/info.py
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from staff_portal.api.deps import get_core
from staff_portal.core.introspection import introspect
from staff_portal.schemas.info import ErrorOut, InfoOut

router = APIRouter(tags=["admin"])

ADMIN_KEY_REQUIRED = 'Please provide the "adminKey" as a query parameter'

@router.get(
    "/info",
    response_model=InfoOut,
    responses={status.HTTP_403_FORBIDDEN: {"model": ErrorOut}},
)
async def info(adminKey: str | None = Query(default=None), core=Depends(get_core)):
    """
    Admin diagnostics: registered modules and every mounted endpoint.

    Args:
        adminKey: Must equal the configured admin key

    Returns:
        dict: {"modules": [...], "endpoints": ["GET /info", ...]}
        403 {"err": ...} when the key is missing or wrong, or no key is configured
    """
    expected = core.options.admin_key
    if not expected or adminKey != expected:
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"err": ADMIN_KEY_REQUIRED})
    return {"modules": core.registry.names, "endpoints": introspect(core.app)}
