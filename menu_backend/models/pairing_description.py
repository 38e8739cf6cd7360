"""
Cache of generated pairing upsell copy.
The spreadsheet export is read-only, so generated descriptions are kept here
and reused on the next request for the same dish/suggestion/language.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from menu_backend.database import Base


class PairingDescription(Base):
    __tablename__ = "pairing_descriptions"
    __table_args__ = (
        UniqueConstraint("dish_id", "suggestion", "lang", name="uq_pairing_description"),
    )

    id = Column(Integer, primary_key=True, index=True)
    dish_id = Column(String, nullable=False, index=True)
    suggestion = Column(String, nullable=False)
    lang = Column(String, nullable=False, default="nl")
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
