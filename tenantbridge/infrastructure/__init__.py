"""Infrastructure adapters: cluster API, tenancy, persistence, security."""
