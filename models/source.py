from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, CheckConstraint
from datetime import datetime
from models.base import Base, JSONText


class Source(Base):
    """
    A registered data source: a file (remote, uploaded or local) or an
    HTTP endpoint.

    Design:
    - `config` is a JSON blob whose shape depends on `type`; the shape is
      validated at the API boundary, never by the store
    - Rows are never physically deleted by the API; `is_active = False`
      hides them from every read and mutation
    - `last_request_*` columns hold the outcome of the most recent probe
    """
    __tablename__ = "sources"

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(Text, nullable=False)
    type = Column(String(10), nullable=False)
    description = Column(Text, nullable=True)
    config = Column(JSONText, nullable=False)

    # Timestamps; updated_at is set by the repository on edits only,
    # recording a probe leaves it alone
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    created_by = Column(Text, default="anonymous")
    is_active = Column(Boolean, default=True)

    # Last probe outcome (denormalized)
    last_request_at = Column(DateTime, nullable=True)
    last_request_status = Column(Text, nullable=True)
    last_request_data = Column(JSONText, nullable=True)
    last_request_error = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("type IN ('file', 'url')", name="ck_sources_type"),
        {"sqlite_autoincrement": True},
    )
