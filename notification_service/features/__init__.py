"""Feature packages: one directory per domain, each with models, service and router."""
