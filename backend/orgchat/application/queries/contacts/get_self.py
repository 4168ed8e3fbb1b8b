"""GetSelf Query - The caller's own directory row (name, domain)."""

import logging
from dataclasses import dataclass
from typing import Optional

from orgchat.application.common.interfaces import Query, QueryHandler
from orgchat.domain.entities.contact import Contact
from orgchat.domain.ports.directory import Directory
from orgchat.domain.value_objects.role import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GetSelfQuery(Query[Optional[Contact]]):
    email: str
    role: Role


class GetSelfHandler(QueryHandler[Optional[Contact]]):
    def __init__(self, directory: Directory):
        self._directory = directory

    async def execute(self, query: GetSelfQuery) -> Optional[Contact]:
        try:
            return await self._directory.get_self(query.email, query.role)
        except Exception as e:
            logger.warning(f"[GetSelf] Could not read {query.role.table} row: {e}")
            return None
