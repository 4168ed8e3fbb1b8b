"""
orgchat - Realtime direct messaging for a role- and domain-partitioned organization.

Layers:
- domain/          → entities, value objects, ports, pure rules
- application/     → queries, commands and the chat session services
- infrastructure/  → Prisma, Redis adapters
- setup/ioc/       → dishka container
"""

__version__ = "0.1.0"
