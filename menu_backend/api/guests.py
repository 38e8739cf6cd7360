"""
Guest API endpoints - WhatsApp opt-ins and analytics events
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from menu_backend.database import get_db
from menu_backend.models.guest import AnalyticsEvent, OptIn

logger = logging.getLogger(__name__)

router = APIRouter()


class OptInCreate(BaseModel):
    name: str
    phone: str
    lang: str = "nl"
    user_taste: Optional[str] = None
    user_diet: Optional[str] = None
    consent: bool

    @field_validator("name", "phone")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        digits = [c for c in v if c.isdigit()]
        if len(digits) < 8:
            raise ValueError("phone number is too short")
        return v

    @field_validator("consent")
    @classmethod
    def require_consent(cls, v: bool) -> bool:
        if not v:
            raise ValueError("consent is required")
        return v


class EventCreate(BaseModel):
    event: str
    session_id: Optional[str] = None
    payload: Dict[str, Any] = {}

    @field_validator("event")
    @classmethod
    def validate_event(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("event must not be empty")
        return v


@router.post("/opt-in")
async def create_opt_in(data: OptInCreate, db: AsyncSession = Depends(get_db)):
    """Store the phone number of a guest who wants WhatsApp updates"""
    opt_in = OptIn(**data.model_dump())
    db.add(opt_in)
    await db.flush()
    logger.info(f"Stored opt-in {opt_in.id} ({data.lang})")
    return {"success": True, "id": opt_in.id}


@router.post("/events")
async def record_event(data: EventCreate, db: AsyncSession = Depends(get_db)):
    event = AnalyticsEvent(event=data.event, session_id=data.session_id, payload=data.payload)
    db.add(event)
    await db.flush()
    return {"success": True, "id": event.id}
