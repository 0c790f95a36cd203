"""ExteriorCRM API - FastAPI backend."""
