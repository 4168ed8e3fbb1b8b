"""Contact DTOs: directory rows."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from orgchat.domain.entities.contact import Contact
from orgchat.domain.value_objects.role import Role


class ContactRecord(BaseModel):
    """A row of one of the admin / worker / super_admin tables."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    email: str
    domain: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value) if value is not None else value

    def to_entity(self, role: Role) -> Contact:
        return Contact(
            id=self.id,
            name=self.name or "",
            email=self.email,
            role=role,
            domain=self.domain,
        )
