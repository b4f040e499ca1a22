"""Shared telemetry: logging setup."""

from tenantbridge.shared.telemetry.logging import setup_logging

__all__ = ["setup_logging"]
