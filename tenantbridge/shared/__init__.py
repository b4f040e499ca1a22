"""Shared utilities: concurrent stores and telemetry helpers.

Used by domain-agnostic infrastructure. No business logic.
"""

from tenantbridge.shared.concurrent_map import ConcurrentMap

__all__ = ["ConcurrentMap"]
