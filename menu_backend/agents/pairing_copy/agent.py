"""
Pairing Copy Agent
Writes the one-line upsell text shown when a guest taps a pairing chip
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from menu_backend.agents.base_agent import BaseAgent
from menu_backend.agents.pairing_copy.prompts import pairing_prompt
from menu_backend.models.pairing_description import PairingDescription
from menu_backend.schemas.menu import Dish, PairingSuggestion
from menu_backend.services.pairing import pairing_copy_fallback

logger = logging.getLogger(__name__)


class PairingCopyAgent(BaseAgent):
    """Upsell copy from the sheet, the stored cache, the LLM or a template, in that order"""

    def __init__(self, llm=None):
        super().__init__(name="PairingCopyAgent", llm=llm)

    async def process(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return await self.describe(
            context["db"],
            context["dish"],
            context["suggestion"],
            context.get("lang", "nl"),
        )

    async def describe(
        self,
        db: AsyncSession,
        dish: Dish,
        suggestion: PairingSuggestion,
        lang: str = "nl",
    ) -> Dict[str, Any]:
        en = lang == "en"
        name = (suggestion.name_en or suggestion.name) if en else suggestion.name

        stored = suggestion.description_en if en else suggestion.description
        if stored:
            return {"description": stored, "source": "sheet"}

        sheet_cache = suggestion.ai_description_en if en else suggestion.ai_description_nl
        if sheet_cache:
            return {"description": sheet_cache, "source": "sheet_ai"}

        cached = await self._get_cached(db, dish.id, suggestion.suggestion, lang)
        if cached:
            return {"description": cached, "source": "cache"}

        dish_name = (dish.title_en or dish.name) if en else dish.name
        generated = await self.generate_response(pairing_prompt(dish_name, name, lang), lang=lang)
        if generated:
            await self._store(db, dish.id, suggestion.suggestion, lang, generated)
            return {"description": generated, "source": "ai"}

        return {"description": pairing_copy_fallback(name, lang), "source": "template"}

    async def _get_cached(self, db: AsyncSession, dish_id: str, suggestion: str, lang: str) -> Optional[str]:
        result = await db.execute(
            select(PairingDescription.description).where(
                PairingDescription.dish_id == dish_id,
                PairingDescription.suggestion == suggestion,
                PairingDescription.lang == lang,
            )
        )
        return result.scalar_one_or_none()

    async def _store(self, db: AsyncSession, dish_id: str, suggestion: str, lang: str, description: str) -> None:
        try:
            async with db.begin_nested():
                db.add(PairingDescription(
                    dish_id=dish_id,
                    suggestion=suggestion,
                    lang=lang,
                    description=description,
                ))
        except IntegrityError:
            # another request stored the same copy first; only this insert is undone
            logger.info(f"Pairing copy for {dish_id}/{suggestion} ({lang}) already stored")
