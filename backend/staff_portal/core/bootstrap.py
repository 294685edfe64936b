# staff_portal/core/bootstrap.py
"""
Bootstrap module for first startup.
Registration through the API is disabled, so the first account has to be
seeded from environment variables.
"""
import os
from staff_portal.core.logger import LogFunction
from staff_portal.core.security import hash_password
from staff_portal.models.user import User

async def ensure_default_user(log: LogFunction) -> User | None:
    """
    If the user collection is empty, create an active default user.
    Only takes effect under the following conditions:
      - Currently no user exists at all
      - And DEFAULT_USER_PASSWORD is set (to avoid a default weak password)
    Environment variables:
      DEFAULT_USER_NAME     (default: "admin")
      DEFAULT_USER_EMAIL    (default: "admin@example.com")
      DEFAULT_USER_PASSWORD (required, otherwise won't create)

    Returns:
        The created user, or None when nothing was created
    """
    if await User.all().exists():
        return None

    password = os.getenv("DEFAULT_USER_PASSWORD")
    if not password:
        log("warn", "[bootstrap] No users present, but DEFAULT_USER_PASSWORD not set -> skip creating default user.")
        return None

    user = await User.create(
        username=os.getenv("DEFAULT_USER_NAME", "admin"),
        email=os.getenv("DEFAULT_USER_EMAIL", "admin@example.com"),
        hashed_password=hash_password(password),
        active=True,
    )
    log("warn", f"[bootstrap] Created default user -> username={user.username} email={user.email} id={user.id}")
    return user
