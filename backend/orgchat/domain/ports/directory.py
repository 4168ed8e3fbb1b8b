"""
Directory Port - Read access to the three role-scoped member tables.
Implementation: orgchat/infrastructure/persistence/prisma_directory.py
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from orgchat.domain.entities.contact import Contact
from orgchat.domain.value_objects.role import Role


@dataclass(frozen=True)
class DirectoryFilter:
    domain: Optional[str] = None  # keep only rows in this domain
    exclude_email: Optional[str] = None  # drop the row with this email


class Directory(ABC):
    @abstractmethod
    async def query_table(
        self, role: Role, where: Optional[DirectoryFilter] = None
    ) -> list[Contact]: ...

    @abstractmethod
    async def get_self(self, email: str, role: Role) -> Optional[Contact]: ...
