"""Abstract object store interface."""

from abc import ABC, abstractmethod
from typing import Optional


class ObjectStore(ABC):
    """Stores receipt images under opaque handles.

    Implementations raise ``AttachmentError`` when an upload or a deletion
    fails.
    """

    @abstractmethod
    def put(
        self,
        owner_id: str,
        data: bytes,
        content_type: str,
        filename: Optional[str] = None,
    ) -> str:
        """Store bytes for an owner. Returns the new handle."""
        pass

    @abstractmethod
    def get_url(self, handle: str) -> str:
        """Return a URL from which the object can be fetched."""
        pass

    @abstractmethod
    def delete(self, handle: str) -> None:
        """Remove an object. Deleting a missing object is not an error."""
        pass
