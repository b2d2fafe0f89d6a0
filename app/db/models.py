"""Database models."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Document(Base):
    """A single document of the document store.

    ``path`` is ``<collection>/<doc_id>`` where ``collection`` may itself be
    nested, e.g. ``restaurants/R1/kds_orders``.
    """

    __tablename__ = "documents"

    path = Column(String, primary_key=True)
    collection = Column(String, index=True, nullable=False)
    doc_id = Column(String, nullable=False)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
