"""
FastAPI Task Manager backend package.

Layers, leaves first:
- repositories / db: task storage backends (in-memory, SQLite)
- services: existence checks and status updates over a repository
- routers.tasks: HTTP endpoints under /api/tasks

The FastAPI app instance lives in src.api.main.
"""
