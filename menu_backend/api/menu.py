"""
Menu API endpoints - ranked menu, personal recommendations and pairings
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from menu_backend.agents.pairing_copy.agent import PairingCopyAgent
from menu_backend.agents.translation.agent import DishTranslationAgent
from menu_backend.config import get_settings
from menu_backend.database import get_db
from menu_backend.schemas.menu import Context, Dish, UserProfile
from menu_backend.services.catalog import supplier_for
from menu_backend.services.context_service import DAYPART_LABELS, build_context, chef_recommendation_title
from menu_backend.services.matching import passes_menu_filters, taste_to_code
from menu_backend.services.openai_service import OpenAIService, get_openai_service
from menu_backend.services.pairing import select_pairings
from menu_backend.services.ranking import rank_dishes
from menu_backend.services.sheets_service import SheetsService, get_sheets_service
from menu_backend.services.slots import fill_daypart_slots

logger = logging.getLogger(__name__)

router = APIRouter()

settings = get_settings()

# One translation agent per process so its memo survives between requests
_translation_agent: Optional[DishTranslationAgent] = None


def get_translation_agent(llm: OpenAIService = Depends(get_openai_service)) -> DishTranslationAgent:
    global _translation_agent
    if _translation_agent is None or _translation_agent.llm is not llm:
        _translation_agent = DishTranslationAgent(llm=llm)
    return _translation_agent


def get_pairing_copy_agent(llm: OpenAIService = Depends(get_openai_service)) -> PairingCopyAgent:
    return PairingCopyAgent(llm=llm)


def get_context() -> Context:
    return build_context()


def _profile(diet: str, taste: str) -> UserProfile:
    try:
        return UserProfile(diet=diet, taste=taste)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors()[0]["msg"])


def _lang(lang: str) -> str:
    return "en" if lang == "en" else "nl"


async def _cards(dishes: List[Dish], lang: str, translator: DishTranslationAgent) -> List[Dict[str, Any]]:
    translations = await asyncio.gather(*(translator.translate(d, lang) for d in dishes))
    return [_card(d, t) for d, t in zip(dishes, translations)]


def _card(dish: Dish, translation: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": dish.id,
        "name": translation["title"],
        "description": translation["description"],
        "category": translation["category"],
        "original_name": dish.name,
        "section": dish.section,
        "price": dish.price,
        "currency": settings.CURRENCY,
        "type": dish.type,
        "diet": dish.diet,
        "tags": dish.tags,
        "supplier": supplier_for(dish),
        "is_week": dish.is_week,
    }


@router.get("")
async def get_menu(
    diet: str = "all",
    taste: str = "",
    lang: str = "nl",
    vegetarian: bool = False,
    gluten_free: bool = False,
    sheets: SheetsService = Depends(get_sheets_service),
    translator: DishTranslationAgent = Depends(get_translation_agent),
    context: Context = Depends(get_context),
):
    """Full ranked menu with week specials, special dish and two personal picks"""
    user = _profile(diet, taste)
    lang = _lang(lang)

    menu = await sheets.get_menu()
    weekmenu = await sheets.get_weekmenu()

    visible = [d for d in menu if passes_menu_filters(d, vegetarian, gluten_free)]
    ranked = rank_dishes(visible, user, context)
    week = rank_dishes([d for d in weekmenu if passes_menu_filters(d, vegetarian, gluten_free)], user, context)
    special = week[0] if week else (ranked[0] if ranked else None)
    recommendations = fill_daypart_slots(menu, user, context, week_ids={d.id for d in weekmenu})

    return {
        "dishes": await _cards(ranked, lang, translator),
        "week_specials": await _cards(week, lang, translator),
        "special_dish": (await _cards([special], lang, translator))[0] if special else None,
        "recommendations": await _cards(recommendations, lang, translator),
        "recommendation_title": chef_recommendation_title(lang),
        "period": await sheets.get_current_period(),
        "context": {
            "daypart": context.daypart.value,
            "daypart_label": DAYPART_LABELS[context.daypart][lang],
            "hour": context.hour,
            "is_friday": context.is_friday,
            "taste_code": taste_to_code(user.taste),
        },
    }


@router.get("/recommendations")
async def get_recommendations(
    diet: str = "all",
    taste: str = "",
    lang: str = "nl",
    sheets: SheetsService = Depends(get_sheets_service),
    translator: DishTranslationAgent = Depends(get_translation_agent),
    context: Context = Depends(get_context),
):
    """The two personal recommendations for the current daypart"""
    user = _profile(diet, taste)
    lang = _lang(lang)

    menu = await sheets.get_menu()
    weekmenu = await sheets.get_weekmenu()
    picks = fill_daypart_slots(menu, user, context, week_ids={d.id for d in weekmenu})

    return {
        "daypart": context.daypart.value,
        "title": chef_recommendation_title(lang),
        "dishes": await _cards(picks, lang, translator),
    }


@router.get("/dishes/{dish_id}/pairings")
async def get_dish_pairings(
    dish_id: str,
    taste: str = "",
    diet: str = "all",
    lang: str = "nl",
    db: AsyncSession = Depends(get_db),
    sheets: SheetsService = Depends(get_sheets_service),
    agent: PairingCopyAgent = Depends(get_pairing_copy_agent),
):
    """Up to three pairing suggestions for a dish, each with upsell copy"""
    user = _profile(diet, taste)
    lang = _lang(lang)

    dishes = await sheets.get_menu() + await sheets.get_weekmenu()
    dish = next((d for d in dishes if d.id == dish_id), None)
    if dish is None:
        raise HTTPException(status_code=404, detail="Dish not found")

    suggestions = select_pairings(dish, await sheets.get_pairings(), user, await sheets.get_rules())

    results = []
    for suggestion in suggestions:
        copy = await agent.describe(db, dish, suggestion, lang)
        results.append({
            "kind": suggestion.kind,
            "name": suggestion.name_en if lang == "en" and suggestion.name_en else suggestion.name,
            "suggestion": suggestion.suggestion_en if lang == "en" else suggestion.suggestion,
            "price": suggestion.price,
            "description": copy["description"],
            "description_source": copy["source"],
            "upsell_id": suggestion.upsell_id,
            "score": suggestion.score,
            "source": suggestion.source,
        })

    return {"dish_id": dish.id, "pairings": results}
