"""
FastAPI Kanban Board Backend package.

Categories (board columns) and tasks (cards) behind JWT bearer
authentication. The ASGI application lives in `kanban_api.main:app`.
"""

__version__ = "0.1.0"
