"""Read-only resource listing through the resource resolver.

The group path segment "core" stands for the core API group ("").
"""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Query

from tenantbridge.api.v1.dependencies import Resolver
from tenantbridge.domain.value_objects import GroupKind
from tenantbridge.schemas.resource import ResourceListResponse

router = APIRouter()

CORE_GROUP_ALIAS = "core"


@router.get("/{group}/{kind}", response_model=ResourceListResponse)
async def list_resources(
    group: str,
    kind: str,
    resolver: Resolver,
    namespace: Annotated[str | None, Query(max_length=63)] = None,
    version: Annotated[list[str] | None, Query()] = None,
    label_selector: Annotated[str | None, Query()] = None,
) -> ResourceListResponse:
    """List instances of group/kind, scoped to namespace when the kind is namespaced.

    Repeat version to give acceptable versions in preference order.
    """
    group_kind = GroupKind("" if group == CORE_GROUP_ALIAS else group, kind)
    handle = await asyncio.to_thread(
        resolver.resolve, group_kind, namespace, *(version or [])
    )
    kwargs = {"label_selector": label_selector} if label_selector else {}
    listing = await asyncio.to_thread(handle.list, **kwargs)
    return ResourceListResponse(
        api_version=handle.api_version,
        kind=handle.kind,
        plural=handle.plural,
        scope=handle.scope,
        namespace=handle.namespace,
        items=listing.get("items") or [],
    )
