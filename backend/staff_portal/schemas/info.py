# staff_portal/schemas/info.py
"""
Pydantic schemas for the admin info endpoint.
"""
from typing import List
from pydantic import BaseModel

class InfoOut(BaseModel):
    """Registered module names and the flattened endpoint list."""
    modules: List[str]
    endpoints: List[str]

class ErrorOut(BaseModel):
    """Error payload used by the core's own endpoints."""
    err: str
