"""SQLAlchemy-backed document store."""
import logging
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.models import Document
from app.services.store.base import DocumentExistsError, DocumentStore, document_path

logger = logging.getLogger(__name__)


class SqlDocumentStore(DocumentStore):
    """Document store on the ``documents`` table.

    Every operation opens its own session, so concurrent operations issued
    with ``asyncio.gather`` never share one.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        async with self.session_factory() as session:
            document = await session.get(Document, document_path(collection, doc_id))
            return dict(document.data) if document else None

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        path = document_path(collection, doc_id)
        async with self.session_factory() as session:
            document = await session.get(Document, path)
            if document:
                document.data = data
            else:
                session.add(Document(path=path, collection=collection, doc_id=doc_id, data=data))
            await session.commit()

    async def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        async with self.session_factory() as session:
            session.add(
                Document(
                    path=document_path(collection, doc_id),
                    collection=collection,
                    doc_id=doc_id,
                    data=data,
                )
            )
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                logger.debug(f"[STORE] Create conflict on {collection}/{doc_id}: {e}")
                raise DocumentExistsError(collection, doc_id) from e

    async def delete(self, collection: str, doc_id: str) -> None:
        async with self.session_factory() as session:
            await session.execute(
                delete(Document).where(Document.path == document_path(collection, doc_id))
            )
            await session.commit()

    async def list(self, collection: str) -> List[Tuple[str, Dict[str, Any]]]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Document)
                .where(Document.collection == collection)
                .order_by(Document.created_at)
            )
            return [(document.doc_id, dict(document.data)) for document in result.scalars().all()]
