from sqlalchemy import Column, Integer, Text, DateTime
from datetime import datetime
from models.base import Base


class Processor(Base):
    """
    A named processing step fed by another record.

    `input_source` holds the id of either a Source or another Processor.
    There is no foreign key: the reference is resolved by application
    code, which tries the sources table first.
    """
    __tablename__ = "processors"

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    input_source = Column(Text, nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        {"sqlite_autoincrement": True},
    )
