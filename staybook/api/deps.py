"""Shared API dependencies: single import point for all routers.

Re-exports the database session and principal dependencies so that router
modules can import everything they need from one place::

    from staybook.api.deps import Page, get_current_principal, get_db
"""

from dataclasses import dataclass

from fastapi import Query

from staybook.auth.dependencies import Principal, get_current_principal
from staybook.config import settings
from staybook.database import get_db


@dataclass(frozen=True)
class Page:
    skip: int
    limit: int


def get_page(
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> Page:
    """Offset pagination parameters shared by every list endpoint."""
    return Page(skip=skip, limit=limit)


__all__ = [
    "Page",
    "Principal",
    "get_current_principal",
    "get_db",
    "get_page",
]
