"""Core CloudCrud facade.

This module defines the main entry point used by applications and tests.
"""

import logging
from collections.abc import Iterable, Mapping
from types import ModuleType
from typing import Any

from dotenv import load_dotenv

from cloudcrud.core.dispatcher.dispatcher import Dispatcher, OperationContext
from cloudcrud.core.records.record_access import RecordAccess
from cloudcrud.core.schema_registry.schema_registry import SchemaRegistry
from cloudcrud.core.spock.spock import Spock
from cloudcrud.core.store.factory import create_document_store
from cloudcrud.core.store.protocol import DocumentStore

logger = logging.getLogger(__name__)
load_dotenv()


class CloudCrud:
    """Core facade for the CloudCrud data-access layer."""

    def __init__(self, *args, **kwargs):
        """Prevent direct construction; use `await CloudCrud.create(...)` instead."""
        raise RuntimeError("Use: instance = await CloudCrud.create(...)")

    def _initialize(
        self,
        *,
        config_path: str | None = None,
        config: dict[str, Any] | None = None,
        store: DocumentStore | None = None,
        modules: Iterable[ModuleType] = (),
    ):
        """Initialize CloudCrud internal components.

        Args:
            config_path: Path to JSON configuration file
            config: Optional configuration dictionary
            store: Document store to use instead of the configured backend
            modules: Extra modules holding ``@operation`` definitions
        """
        self.spock = Spock(config_path=config_path)
        self.spock.load(config=config)
        settings = self.spock.get_cloudcrud_config()

        self.store = store if store is not None else create_document_store(self.spock)
        self.schema_registry = SchemaRegistry(
            self.store, seed_record=bool(settings.get("seed_record_on_create_table"))
        )
        self.records = RecordAccess(
            self.store, strict_filters=bool(settings.get("strict_filter_operators"))
        )
        self.dispatcher = Dispatcher(
            OperationContext(
                schema_registry=self.schema_registry,
                records=self.records,
                default_limit=settings.get("default_limit", 100),
                max_limit=settings.get("max_limit"),
                server_version=str(settings.get("server_version", "")),
                features=dict(settings.get("features") or {}),
            ),
            modules=modules,
        )

        # Alias
        self.config_manager = self.spock
        self.table_manager = self.schema_registry
        self.record_manager = self.records
        logger.debug("CloudCrud instance created.")

    @classmethod
    async def create(
        cls,
        *,
        config_path: str | None = None,
        config: dict[str, Any] | None = None,
        store: DocumentStore | None = None,
        modules: Iterable[ModuleType] = (),
    ):
        """Factory method to create and initialize CloudCrud.

        The store is probed once with ``list_classes`` so that an unreachable
        backend fails here rather than on the first operation.

        Args:
            config_path: Path to JSON configuration file
            config: Optional configuration dictionary
            store: Optional document store; defaults to the configured backend
            modules: Extra modules holding ``@operation`` definitions
        """
        instance = cls.__new__(cls)  # bypass __init__
        instance._initialize(
            config_path=config_path, config=config, store=store, modules=modules
        )
        classes = await instance.store.list_classes()
        logger.info(
            "CloudCrud ready on store '%s' with %d class(es).", instance.store.name, len(classes)
        )
        return instance

    async def run(self, name: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Run a named operation and return its envelope.

        Args:
            name: Operation name, e.g. "readTable".
            params: Operation parameters.

        Returns:
            The envelope dict (``{"success": True, ...}``).
        """
        return await self.dispatcher.run(name, params)
