"""
APPLICATION LAYER - Use Cases & Orchestration

This layer contains:
- commands/  → Write operations (send, edit, soft delete, forward)
- queries/   → Read operations (contacts, self info, history)
- services/  → Stateful orchestration of the active conversation
- dto/       → Pydantic row / payload models
- common/    → Shared interfaces (Command, Query base classes)

Rules:
- Depends on the domain layer, plus config (logging) and observability (metrics)
- No Prisma/Redis code here
"""
