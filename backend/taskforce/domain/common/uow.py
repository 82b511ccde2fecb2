"""Unit of Work port.

A use case opens the UoW as a context manager and reads through the
repositories it exposes.  Directory use cases only read and never call
``commit``.
"""

from __future__ import annotations

import abc
from typing import Self

from taskforce.domain.directory.ports import DirectoryRepository


class UnitOfWork(abc.ABC):
    """Transactional boundary shared by all repositories of one request."""

    directory: DirectoryRepository

    @abc.abstractmethod
    def __enter__(self) -> Self:
        ...

    @abc.abstractmethod
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...

    @abc.abstractmethod
    def commit(self) -> None:
        ...

    @abc.abstractmethod
    def rollback(self) -> None:
        ...
