"""Small core utilities used across the project."""

import logging

from cloudcrud.core.store.codec import format_timestamp, utc_now

# Set up a module-level logger
logger = logging.getLogger(__name__)


def iso_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string ending in ``Z``."""
    return format_timestamp(utc_now())
