"""
Task Service package.

A FastAPI application listing and creating tasks stored in a single
relational table. The ASGI app is importable as ``tasks_api.main:app``.
"""

__version__ = "0.1.0"
