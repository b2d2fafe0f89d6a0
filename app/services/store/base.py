"""Document store interface."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple


class DocumentExistsError(Exception):
    """Raised by ``create`` when the document already exists."""

    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"Document {collection}/{doc_id} already exists")
        self.collection = collection
        self.doc_id = doc_id


def collection_path(*parts: str) -> str:
    """Join path segments into a collection path, e.g. ``restaurants/R1/kds_orders``."""
    return "/".join(str(part).strip("/") for part in parts)


def check_doc_id(doc_id: str) -> str:
    """Reject ids that would address a document outside their collection."""
    if not doc_id or "/" in doc_id:
        raise ValueError(f"Invalid document id: {doc_id!r}")
    return doc_id


def document_path(collection: str, doc_id: str) -> str:
    return f"{collection}/{check_doc_id(doc_id)}"


class DocumentStore(ABC):
    """Abstract per-document key/value store.

    Each operation is atomic for a single document. There is no
    multi-document transaction.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Get a document, or None if it does not exist."""
        pass

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Write a full document, replacing any existing one."""
        pass

    @abstractmethod
    async def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Write a document only if absent. Raises DocumentExistsError otherwise."""
        pass

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing document is a no-op."""
        pass

    @abstractmethod
    async def list(self, collection: str) -> List[Tuple[str, Dict[str, Any]]]:
        """List ``(doc_id, data)`` pairs directly under a collection."""
        pass
