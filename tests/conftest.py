"""Pytest fixtures.

This file adjusts sys.path for src-layout imports.
"""

# ruff: noqa: E402

import os
import sys

# Ensure `src` is on sys.path so imports like `from cloudcrud.core...` resolve during tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if os.path.isdir(SRC):
    sys.path.insert(0, SRC)
sys.path.insert(0, ROOT)

import pytest
import pytest_asyncio
from rich.traceback import install

from cloudcrud.core.cloudcrud import CloudCrud
from cloudcrud.core.records.record_access import RecordAccess
from cloudcrud.core.schema_registry.schema_registry import SchemaRegistry
from cloudcrud.core.store.memory import InMemoryDocumentStore

# Enable readable tracebacks in development / test environments.
# Can be disabled with PYTEST_RICH=0
if os.getenv("PYTEST_RICH", "1") == "1":
    install(
        show_locals=True,  # show local variables for each frame
        width=None,  # use terminal width
        word_wrap=True,  # wrap long lines
        extra_lines=1,  # some context around lines
        suppress=["/usr/lib/python3", "site-packages"],  # hide "noisy" third-party frames
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Provide an empty in-memory document store."""
    return InMemoryDocumentStore(name="test")


@pytest.fixture
def records(store) -> RecordAccess:
    """Provide a lenient RecordAccess bound to the test store."""
    return RecordAccess(store)


@pytest.fixture
def registry(store) -> SchemaRegistry:
    """Provide a SchemaRegistry bound to the test store."""
    return SchemaRegistry(store)


@pytest_asyncio.fixture
async def cloudcrud(store):
    """Provide a CloudCrud instance wired to the test store."""
    return await CloudCrud.create(store=store)
