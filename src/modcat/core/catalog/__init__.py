"""
Mod catalog: local replica, sync and HTTP API.

The catalog consists of:
- Database layer (db/) - SQLite schema, store handle and read queries
- Sync layer (sync/) - Full-replace refresh from the remote database
- API layer (api/) - FastAPI endpoints
- Models (models.py) - Pydantic models for rows, responses and sync results
- Errors (errors.py) - Exception hierarchy
"""

__all__: list[str] = []
