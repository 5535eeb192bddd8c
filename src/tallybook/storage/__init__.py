"""Object storage for receipt attachments."""

from tallybook.storage.base import ObjectStore
from tallybook.storage.local import LocalObjectStore

__all__ = ["ObjectStore", "LocalObjectStore"]
