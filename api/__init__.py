"""CloudMaster HTTP API."""
