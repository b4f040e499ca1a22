"""Resource listing API schemas."""

from typing import Any

from pydantic import BaseModel, Field

from tenantbridge.domain.enums import ResourceScope


class ResourceListResponse(BaseModel):
    """Instances of one kind, as listed through a resolved resource handle."""

    api_version: str
    kind: str
    plural: str
    scope: ResourceScope
    namespace: str | None = Field(
        default=None, description="Namespace the listing is bound to (namespaced kinds only)"
    )
    items: list[dict[str, Any]] = Field(default_factory=list)
