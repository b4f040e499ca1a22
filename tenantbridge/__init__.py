"""tenantbridge: tenant-aware bridge between an HTTP API and a cluster API."""
