"""Persistence adapters for the canvas store."""

from typing import Optional

from canvasboard.canvas.persistence.base import PersistenceAdapter
from canvasboard.canvas.persistence.local import LocalSnapshotPersistence
from canvasboard.canvas.persistence.rest import RestPersistence
from canvasboard.config import settings


def create_adapter(backend: Optional[str] = None) -> PersistenceAdapter:
    """Build the adapter named by ``backend`` (default: settings.persistence_backend)."""
    backend = backend or settings.persistence_backend
    if backend == "local":
        return LocalSnapshotPersistence()
    if backend == "rest":
        return RestPersistence()
    raise ValueError(f"Unknown persistence backend: {backend!r}")


__all__ = [
    "PersistenceAdapter",
    "LocalSnapshotPersistence",
    "RestPersistence",
    "create_adapter",
]
