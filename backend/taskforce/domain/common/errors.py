"""Domain-level exceptions.

Adapters translate infrastructure failures into these types so that use
cases and routers never catch SQLAlchemy or HTTP client errors directly.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for all directory domain errors."""


class BackendQueryError(DomainError):
    """The persistence backend failed while serving a read."""

    def __init__(self, resource: str, detail: str = "") -> None:
        self.resource = resource
        self.detail = detail
        message = f"Backend query failed for {resource}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
