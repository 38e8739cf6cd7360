"""
Core menu records shared by the catalog loader, the recommendation
services and the API layer.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Daypart(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    APERITIF = "aperitif"
    DINNER = "dinner"


DIET_KEYS = {"all", "meat", "fish", "veg", "meatfish", "glutenfree", "glutfree", "vegan"}


class Dish(BaseModel):
    """One sellable menu line, built from a single spreadsheet row"""
    id: str
    name: str
    section: str = ""
    title_en: str = ""
    description: str = ""
    description_en: str = ""
    price: float = 0.0
    type: str = ""
    category: str = ""
    diet: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    supplier: str = ""
    active: bool = True
    is_week: bool = False
    date: Optional[str] = None
    venue: str = "tolhuis"

    class Config:
        frozen = True

    @property
    def title(self) -> str:
        return self.name


class Pairing(BaseModel):
    """Suggested add-on for a specific dish, from the pairings sheet"""
    dish_id: str
    suggestion: str
    venue: str = "tolhuis"
    suggestion_en: str = ""
    description: str = ""
    description_en: str = ""
    ai_description_nl: str = ""
    ai_description_en: str = ""
    kind: str = "food"
    match_tags: list[str] = Field(default_factory=list)
    priority: int = 5
    active: bool = True
    row_index: Optional[int] = None

    class Config:
        frozen = True


class PairingRule(BaseModel):
    """
    Taste-profile rule that synthesizes pairings without a sheet entry.

    `pairings` holds "kind:name" tokens. Rules carrying a `taste_code` are
    matched on the canonical code; rules with only a free-text `key` fall back
    to substring matching on the guest's taste label.
    """
    key: str = ""
    taste_code: Optional[str] = None
    pairings: list[str] = Field(default_factory=list)


class PairingSuggestion(BaseModel):
    dish_id: str
    kind: str
    name: str
    name_en: str = ""
    suggestion: str = ""
    suggestion_en: str = ""
    price: Optional[float] = None
    description: str = ""
    description_en: str = ""
    ai_description_nl: str = ""
    ai_description_en: str = ""
    match_tags: list[str] = Field(default_factory=list)
    upsell_id: str
    priority: int = 0
    score: int = 0
    source: str = "sheet"


class UserProfile(BaseModel):
    """Quiz answers of the guest"""
    name: str = ""
    diet: str = "all"
    taste: str = ""
    phone: str = ""

    @field_validator("diet", mode="before")
    @classmethod
    def validate_diet(cls, v):
        key = (v or "all").strip().lower()
        if key not in DIET_KEYS:
            raise ValueError(f"Unknown diet. Must be one of: {sorted(DIET_KEYS)}")
        return key


class Context(BaseModel):
    """Time-derived context; day_of_week follows datetime.weekday() (Monday=0)"""
    hour: int
    day_of_week: int
    daypart: Daypart
    weather_category: Optional[str] = None
    timestamp: Optional[datetime] = None

    @property
    def is_friday(self) -> bool:
        return self.day_of_week == 4
