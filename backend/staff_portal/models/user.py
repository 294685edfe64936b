# staff_portal/models/user.py
"""
Database model for users.
The only collection the core owns. It is read and written through the auth
bridge hooks, never by modules directly.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User account.

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Email and username are unique across all users
    - Only users with ``active=True`` may log in
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    email = fields.CharField(max_length=256, unique=True, index=True)
    username = fields.CharField(max_length=256, unique=True, index=True)
    hashed_password = fields.CharField(max_length=255)
    active = fields.BooleanField(default=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "users"
