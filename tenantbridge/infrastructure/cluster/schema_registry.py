"""Registry of custom resource schemas (CRDs) registered by this process.

register() is idempotent against the cluster: a remote "already exists"
converges to success and the existing CRD is recorded. Registering the
same GroupVersion twice in one registry is a local-state error.

The existence check and the final write are not atomic across the remote
call: two concurrent registrations of one schema may both reach the
cluster, one of them converging on 409. Both succeed. The final write is
set-if-absent, so the registry keeps the first entry and never holds
duplicate or partial entries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from http import HTTPStatus
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from kubernetes.client.rest import ApiException

from tenantbridge.domain.entities import CustomResourceSchema, RegisteredSchema
from tenantbridge.domain.exceptions import (
    InvalidGroupVersionException,
    SchemaAlreadyRegisteredException,
)
from tenantbridge.domain.value_objects import GroupVersion
from tenantbridge.shared.concurrent_map import ConcurrentMap

if TYPE_CHECKING:
    from tenantbridge.infrastructure.cluster.client import ClusterClient

logger = logging.getLogger(__name__)

CRD_KIND = "CustomResourceDefinition"


class SchemaRegistry:
    """Thread-safe registry of CRDs keyed by GroupVersion."""

    def __init__(self, cluster: "ClusterClient") -> None:
        self._cluster = cluster
        self._schemas: ConcurrentMap[GroupVersion, RegisteredSchema] = ConcurrentMap()

    def register(self, schema: CustomResourceSchema) -> bool:
        """Create the CRD in the cluster and record it.

        Args:
            schema: CRD manifest with its GroupVersion.

        Returns:
            True once the schema is recorded.

        Raises:
            InvalidGroupVersionException: Schema's group/version is malformed.
            SchemaAlreadyRegisteredException: Already in this registry.
            ApiException: Any remote failure other than 409 (not retried).
        """
        gv = schema.group_version
        if not gv.is_well_formed():
            raise InvalidGroupVersionException(gv.group, gv.version)
        if gv in self._schemas:
            raise SchemaAlreadyRegisteredException(str(gv))

        try:
            definition = self._cluster.create_custom_resource_definition(
                schema.definition
            )
        except ApiException as e:
            if e.status != HTTPStatus.CONFLICT:
                raise
            logger.info("CRD %s already exists in cluster; recording it", schema.name)
            definition = self._cluster.read_custom_resource_definition(schema.name)

        _, stored = self._schemas.set_if_absent(
            gv, RegisteredSchema(gv, schema.kind, definition)
        )
        if not stored:
            logger.info("Schema %s recorded by a concurrent registration", gv)
            return True
        logger.info("Registered schema %s (kind=%s)", gv, schema.kind)
        return True

    def register_manifests(self, paths: Iterable[str | Path]) -> list[RegisteredSchema]:
        """Register every CRD document found in the given YAML files.

        Documents of other kinds are skipped. Local duplicates are logged
        and skipped; remote failures propagate.

        Returns:
            Schemas recorded by this call.
        """
        recorded: list[RegisteredSchema] = []
        for path in paths:
            with open(path, encoding="utf-8") as fh:
                documents = [d for d in yaml.safe_load_all(fh) if d]
            for doc in documents:
                if doc.get("kind") != CRD_KIND:
                    logger.debug("Skipping %s document in %s", doc.get("kind"), path)
                    continue
                schema = CustomResourceSchema.from_manifest(doc)
                try:
                    self.register(schema)
                except SchemaAlreadyRegisteredException:
                    logger.warning("Schema %s listed twice; skipping %s", schema.group_version, path)
                    continue
                registered = self.get(schema.group_version)
                if registered is not None:
                    recorded.append(registered)
        return recorded

    def get(self, group_version: GroupVersion) -> RegisteredSchema | None:
        """Return the recorded schema for group_version, or None."""
        return self._schemas.get(group_version)

    def list_schemas(self) -> list[RegisteredSchema]:
        """Return all recorded schemas sorted by group/version."""
        return sorted(self._schemas.snapshot().values(), key=lambda s: str(s.group_version))

    def __contains__(self, group_version: object) -> bool:
        return group_version in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)
