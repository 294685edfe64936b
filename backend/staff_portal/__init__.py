"""
Staff portal core.
Wires the HTTP app, the auth layer, the token store, the user store and the
feature modules together.
"""
from .core.portal import Core, CoreOptions

__all__ = ["Core", "CoreOptions"]
