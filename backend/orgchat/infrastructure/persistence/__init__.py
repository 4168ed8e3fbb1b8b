from orgchat.infrastructure.persistence.prisma_message_store import PrismaMessageStore
from orgchat.infrastructure.persistence.prisma_directory import PrismaDirectory

__all__ = ["PrismaMessageStore", "PrismaDirectory"]
