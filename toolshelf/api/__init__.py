"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from toolshelf.api import app

    uvicorn toolshelf.api:app --reload
"""

from toolshelf.api.app import app

__all__ = ["app"]
