"""
Guest context API - daypart, greeting, season and weather for the welcome screen
"""
from typing import Optional

from fastapi import APIRouter, Depends

from menu_backend.agents.intro.agent import ContextualIntroAgent
from menu_backend.services.context_service import (
    DAYPART_LABELS,
    build_context,
    chef_recommendation_title,
    seasonal_context,
    time_context,
)
from menu_backend.services.openai_service import OpenAIService, get_openai_service
from menu_backend.services.weather_service import (
    WeatherService,
    get_weather_service,
    weather_category,
    welcome_message,
)

router = APIRouter()


@router.get("")
async def get_guest_context(
    lang: str = "nl",
    name: str = "",
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    weather_service: WeatherService = Depends(get_weather_service),
    llm: OpenAIService = Depends(get_openai_service),
):
    lang = "en" if lang == "en" else "nl"

    weather = await weather_service.get_current_weather(lat, lon)
    category = weather_category(weather)
    context = build_context(weather_category=category)

    time_ctx = time_context(context.hour)
    season_ctx = seasonal_context(context.timestamp.date())
    welcome = welcome_message(category, season_ctx["season"], lang)

    intro = await ContextualIntroAgent(llm=llm).intro(
        time_ctx, season_ctx, weather.description, welcome, lang, name
    )

    return {
        "daypart": context.daypart.value,
        "daypart_label": DAYPART_LABELS[context.daypart][lang],
        "hour": context.hour,
        "day_of_week": context.day_of_week,
        "is_friday": context.is_friday,
        "greeting": time_ctx["greeting_en"] if lang == "en" else time_ctx["greeting"],
        "time_of_day": time_ctx["period_en"] if lang == "en" else time_ctx["period"],
        "season": season_ctx["season_en"] if lang == "en" else season_ctx["season"],
        "season_message": season_ctx["message_en"] if lang == "en" else season_ctx["message"],
        "weather": weather.model_dump(),
        "weather_category": category,
        "welcome_message": welcome,
        "intro": intro,
        "recommendation_title": chef_recommendation_title(lang),
    }
