"""In-memory document store."""
import copy
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from app.services.store.base import DocumentExistsError, DocumentStore, check_doc_id


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed document store, optionally seeded from a YAML file.

    The seed file maps collection paths to documents keyed by id::

        restaurants:
          R1:
            name: Downtown
    """

    def __init__(self, seed_file: Optional[str] = None):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        if seed_file is not None:
            self.load_seed(seed_file)

    def load_seed(self, seed_file: str) -> None:
        """Load documents from a YAML seed file."""
        with open(Path(seed_file), "r") as f:
            data = yaml.safe_load(f) or {}
        for collection, documents in data.items():
            for doc_id, doc in (documents or {}).items():
                self._collections.setdefault(collection, {})[str(doc_id)] = doc or {}

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        check_doc_id(doc_id)
        doc = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        check_doc_id(doc_id)
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    async def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        check_doc_id(doc_id)
        documents = self._collections.setdefault(collection, {})
        if doc_id in documents:
            raise DocumentExistsError(collection, doc_id)
        documents[doc_id] = copy.deepcopy(data)

    async def delete(self, collection: str, doc_id: str) -> None:
        check_doc_id(doc_id)
        self._collections.get(collection, {}).pop(doc_id, None)

    async def list(self, collection: str) -> List[Tuple[str, Dict[str, Any]]]:
        return [
            (doc_id, copy.deepcopy(doc))
            for doc_id, doc in self._collections.get(collection, {}).items()
        ]
