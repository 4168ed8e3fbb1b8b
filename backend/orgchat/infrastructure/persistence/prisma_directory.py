"""
Prisma Directory Implementation.

One Prisma model per role: Admin, Worker, SuperAdmin (`@@map("super_admin")`).
Only Admin and Worker carry a `domain` column.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from orgchat.application.dto.contact import ContactRecord
from orgchat.domain.entities.contact import Contact
from orgchat.domain.exceptions import DirectoryReadError
from orgchat.domain.ports.directory import Directory, DirectoryFilter
from orgchat.domain.value_objects.role import Role

if TYPE_CHECKING:
    from prisma import Prisma

logger = logging.getLogger(__name__)

# Role -> Prisma client accessor
_ACCESSORS = {
    Role.SUPER_ADMIN: "superadmin",
    Role.ADMIN: "admin",
    Role.WORKER: "worker",
}


class PrismaDirectory(Directory):
    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _table(self, role: Role) -> Any:
        return getattr(self._prisma, _ACCESSORS[role])

    @staticmethod
    def _where(where: Optional[DirectoryFilter]) -> dict[str, Any]:
        clause: dict[str, Any] = {}
        if where is None:
            return clause
        if where.domain:
            clause["domain"] = where.domain
        if where.exclude_email:
            clause["email"] = {"not": where.exclude_email}
        return clause

    async def query_table(
        self, role: Role, where: Optional[DirectoryFilter] = None
    ) -> list[Contact]:
        try:
            rows = await self._table(role).find_many(where=self._where(where))
        except Exception as e:
            raise DirectoryReadError(f"Failed to read {role.table}: {e}", cause=e) from e
        return [ContactRecord.model_validate(row).to_entity(role) for row in rows]

    async def get_self(self, email: str, role: Role) -> Optional[Contact]:
        try:
            row = await self._table(role).find_unique(where={"email": email})
        except Exception as e:
            raise DirectoryReadError(f"Failed to read {role.table}: {e}", cause=e) from e
        if row is None:
            logger.info(f"[PrismaDirectory] No {role.table} row for {email}")
            return None
        return ContactRecord.model_validate(row).to_entity(role)
