# staff_portal/auth/__init__.py
"""
Authentication.
- instance: HTTP endpoints and request validation, storage through hooks
- bridge: hook implementations backed by the user collection and token set
"""
from .bridge import AuthBridge
from .instance import AuthConfig, AuthInstance, send_data

__all__ = ["AuthBridge", "AuthConfig", "AuthInstance", "send_data"]
