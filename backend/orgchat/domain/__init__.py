"""
DOMAIN LAYER - Messaging rules

This layer contains:
- Entities: Identity, Contact, Message
- Value Objects: Role, UserEmail, ConversationKey
- Ports: Interfaces that infrastructure implements
- Services: Pure domain logic (permission matrix, timeline transforms)
- Exceptions: Contained messaging failures

RULES:
1. NO framework imports (no Prisma, Redis, Pydantic, etc.)
2. NO I/O operations
3. Only depends on Python stdlib
"""
