"""
Contextual Intro Agent
Greeting on the welcome screen, written for the time of day, season and weather
"""
import re
from typing import Any, Dict, Optional

from menu_backend.agents.base_agent import BaseAgent
from menu_backend.services.context_service import template_intro

INTRO_PROMPT_NL = """Maak een warme, welkomende intro voor een restaurant app gebaseerd op deze context:

TIJD: {time}
GROET: {greeting}
SEIZOEN: {season}
WEER: {weather}
GEBRUIKER: {user_name}

Schrijf een korte, vriendelijke groet (max 40 woorden) die de tijd, het seizoen en het weer verwerkt. Maak het persoonlijk en uitnodigend. Voeg een passende emoji toe."""

INTRO_PROMPT_EN = """Create a warm, welcoming intro for a restaurant app based on this context:

TIME: {time}
GREETING: {greeting}
SEASON: {season}
WEATHER: {weather}
USER: {user_name}

Write a short, friendly greeting (max 40 words) that incorporates the time, season, and weather context. Make it feel personal and inviting. Include an appropriate emoji."""

_EMOJI_RE = re.compile(
    "[\U0001F600-\U0001F64F\U0001F300-\U0001F5FF\U0001F680-\U0001F6FF"
    "\U0001F1E0-\U0001F1FF\u2600-\u26FF\u2700-\u27BF]"
)
DEFAULT_EMOJI = "🍽️"


def parse_intro(text: str) -> Dict[str, str]:
    """Split a generated intro into greeting, message and emoji"""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    emoji_match = next((m for m in (_EMOJI_RE.search(line) for line in lines) if m), None)
    message = next((line for line in lines if not _EMOJI_RE.search(line)), None) or text.strip()
    return {
        "greeting": " ".join(message.split()[:3]),
        "message": message,
        "emoji": emoji_match.group(0) if emoji_match else DEFAULT_EMOJI,
        "source": "ai",
    }


class ContextualIntroAgent(BaseAgent):

    def __init__(self, llm=None):
        super().__init__(name="ContextualIntroAgent", llm=llm)

    async def process(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return await self.intro(
            context["time"],
            context["season"],
            context.get("weather_description", ""),
            context.get("weather_message", ""),
            context.get("lang", "nl"),
            context.get("user_name", ""),
        )

    async def intro(
        self,
        time_ctx: Dict[str, Any],
        season_ctx: Dict[str, Any],
        weather_description: str = "",
        weather_message: str = "",
        lang: str = "nl",
        user_name: str = "",
    ) -> Dict[str, str]:
        en = lang == "en"
        template = INTRO_PROMPT_EN if en else INTRO_PROMPT_NL
        prompt = template.format(
            time=time_ctx["period_en"] if en else time_ctx["period"],
            greeting=time_ctx["greeting_en"] if en else time_ctx["greeting"],
            season=season_ctx["season_en"] if en else season_ctx["season"],
            weather=weather_description,
            user_name=user_name,
        )

        generated: Optional[str] = await self.generate_response(prompt, lang=lang)
        if generated:
            return parse_intro(generated)
        return template_intro(time_ctx, season_ctx, weather_message, lang, user_name)
