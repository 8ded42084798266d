"""
Kernel Layer

Foundational components of the Taskboard API:
- Identity Core (user accounts, credential hashing, session tokens)
- Persistence models for the identity store

Invariants:
- A stored password is always a bcrypt hash, never plaintext
- Credentials are never logged or returned to callers
"""

from taskboard.kernel.models import Base, User

__all__ = [
    "Base",
    "User",
]
