"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass or Enum)
- Validates itself on creation
- Pure Python (no framework dependencies)
"""

from orgchat.domain.value_objects.role import Role
from orgchat.domain.value_objects.user_email import UserEmail
from orgchat.domain.value_objects.conversation_key import ConversationKey

__all__ = [
    "Role",
    "UserEmail",
    "ConversationKey",
]
