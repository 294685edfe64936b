# staff_portal/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Default user seeding on first startup
- db: Document store (Tortoise ORM) configuration and connection management
- introspection: Flat endpoint listing of the mounted routing tree
- kv: Key/value store client and the session token set
- logger: Injected log function used by modules and the auth bridge
- portal: The Core object that wires everything together
- pubsub: Real-time WebSocket namespaces
- registry: Module registration and mounting
- security: Password hashing and token signing
"""
