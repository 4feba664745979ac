"""
Todo API package.

A small FastAPI service exposing CRUD operations over todos stored in a
relational database. The ASGI application lives in ``todo_api.main``.
"""

__version__ = "0.1.0"
