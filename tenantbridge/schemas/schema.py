"""Registered custom resource schema API schemas."""

from pydantic import BaseModel

from tenantbridge.domain.entities import RegisteredSchema


class SchemaResponse(BaseModel):
    group: str
    version: str
    kind: str
    name: str
    accepted: bool

    @classmethod
    def from_entity(cls, schema: RegisteredSchema) -> "SchemaResponse":
        return cls(
            group=schema.group_version.group,
            version=schema.group_version.version,
            kind=schema.kind,
            name=schema.name,
            accepted=schema.accepted,
        )


class SchemaListResponse(BaseModel):
    items: list[SchemaResponse]
    total: int
