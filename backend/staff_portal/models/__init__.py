# staff_portal/models/__init__.py
"""
Database models module initialization.
Exports the Tortoise ORM models for convenient imports.
"""
from .user import User
