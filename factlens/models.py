from sqlalchemy import Column, Integer, Text, DateTime
from sqlalchemy.sql import func
from .db import Base


class StoredResult(Base):
    __tablename__ = "stored_results"

    # Слот один, поэтому id всегда SLOT_ID
    id = Column(Integer, primary_key=True)
    result_json = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


SLOT_ID = 1
