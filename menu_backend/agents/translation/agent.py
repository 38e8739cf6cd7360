"""
Dish Translation Agent
English title and description for a dish: sheet columns first, then the LLM,
then the word list in translation_service
"""
import logging
from typing import Any, Dict, Optional

from menu_backend.agents.base_agent import BaseAgent
from menu_backend.schemas.menu import Dish
from menu_backend.services.translation_service import translate_category, translate_text

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "Je bent een professionele culinaire copywriter."

TRANSLATION_PROMPT = """Vertaal de volgende Nederlandse gerechtomschrijving naar elegant, natuurlijk Engels voor een menukaart.
Vermijd letterlijke vertalingen of "Dinglish". Gebruik een vloeiende, internationale restauranttoon.

Voorbeeld:
Nederlands:
Titel: Caesar salade
Beschrijving: Gegaarde kippendijen, romeinse sla, croutons en Parmezaan.

Engels:
Title: Caesar Salad
Description: Slow-cooked chicken thighs, romaine lettuce, croutons, and Parmesan cheese.

Vertaal nu dit gerecht:
Titel: {title}
Beschrijving: {description}"""


def parse_translation(text: str) -> tuple[Optional[str], Optional[str]]:
    """Read the "Title: ...\\nDescription: ..." answer format"""
    title = description = None
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.lower().startswith("title:"):
            title = stripped[len("title:"):].strip() or None
        elif stripped.lower().startswith("description:"):
            description = stripped[len("description:"):].strip() or None
    return title, description


class DishTranslationAgent(BaseAgent):

    def __init__(self, llm=None):
        super().__init__(name="DishTranslationAgent", llm=llm)
        # (id, name, description): an edited sheet row misses the memo
        self._memo: Dict[tuple, Dict[str, Any]] = {}

    async def process(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return await self.translate(context["dish"], context.get("lang", "en"))

    async def translate(self, dish: Dish, lang: str = "en") -> Dict[str, Any]:
        if lang == "nl":
            return {
                "title": dish.name,
                "description": dish.description,
                "category": translate_category(dish.category, "nl"),
                "source": "original",
            }

        if dish.title_en:
            return {
                "title": dish.title_en,
                "description": dish.description_en or translate_text(dish.description),
                "category": translate_category(dish.category),
                "source": "sheet",
            }

        memo_key = (dish.id, dish.name, dish.description)
        if memo_key in self._memo:
            return self._memo[memo_key]

        answer = await self.generate_response(
            TRANSLATION_PROMPT.format(title=dish.name, description=dish.description),
            lang=lang,
            system_prompt=SYSTEM_PROMPT,
        )
        if answer:
            title, description = parse_translation(answer)
            if title:
                result = {
                    "title": title,
                    "description": description or dish.description_en or translate_text(dish.description),
                    "category": translate_category(dish.category),
                    "source": "ai",
                }
                self._memo[memo_key] = result
                return result
            logger.info(f"Unparseable translation for {dish.id}, using word list")

        return {
            "title": translate_text(dish.name),
            "description": dish.description_en or translate_text(dish.description),
            "category": translate_category(dish.category),
            "source": "dictionary",
        }
