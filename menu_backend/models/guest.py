"""
Guest-facing records: WhatsApp opt-ins and analytics events
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON
from sqlalchemy.sql import func
from menu_backend.database import Base


class OptIn(Base):
    """Phone number left by a guest who agreed to WhatsApp updates"""
    __tablename__ = "opt_ins"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    lang = Column(String, default="nl")

    # Quiz answers at the time of the opt-in
    user_taste = Column(String, nullable=True)
    user_diet = Column(String, nullable=True)

    consent = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class AnalyticsEvent(Base):
    """A single UI event (quiz step, pairing click, language switch, ...)"""
    __tablename__ = "analytics_events"

    id = Column(Integer, primary_key=True, index=True)
    event = Column(String, nullable=False, index=True)
    session_id = Column(String, nullable=True, index=True)
    payload = Column(JSON, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
