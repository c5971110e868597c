"""
appserver: todo and task lists over SQLite.

Exposes a JSON API under /api and server-rendered HTML fragments under /todos
and /tasks. Build the ASGI application with `appserver.main.create_app`.
"""

__version__ = "0.1.0"
