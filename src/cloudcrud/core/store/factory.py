"""Store - Backend factory."""

import logging
from typing import TYPE_CHECKING

from cloudcrud.core.store.memory import InMemoryDocumentStore
from cloudcrud.core.store.protocol import DocumentStore

if TYPE_CHECKING:
    from cloudcrud.core.spock.spock import Spock

logger = logging.getLogger(__name__)


def create_document_store(spock: "Spock") -> DocumentStore:
    """Build the document store selected by the ``store`` config section.

    Args:
        spock: Loaded configuration manager.

    Returns:
        DocumentStore instance.

    Raises:
        ValueError: If the configured backend is not recognized.
    """
    backend = spock.get_store_config("backend", "memory")
    if backend == "memory":
        name = spock.get_store_config("name", "memory")
        logger.debug("Using in-memory document store '%s'.", name)
        return InMemoryDocumentStore(name=name)
    raise ValueError(f"Unknown store backend: {backend!r}")


__all__ = ["create_document_store"]
