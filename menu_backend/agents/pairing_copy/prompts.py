"""
Prompts for Pairing Copy Agent
"""

PAIRING_PROMPT_NL = """Schrijf een heel korte pairing beschrijving (1 zin, max 15 woorden) voor:

Gerecht: {dish_name}
Pairing: {pairing}

Wees kort en enthousiast. Voeg een relevante emoji toe aan het einde."""


PAIRING_PROMPT_EN = """Write a very short pairing description (1 sentence, max 15 words) for:

Dish: {dish_name}
Pairing: {pairing}

Be brief and enthusiastic. Add a relevant emoji at the end."""


def pairing_prompt(dish_name: str, pairing: str, lang: str = "nl") -> str:
    template = PAIRING_PROMPT_EN if lang == "en" else PAIRING_PROMPT_NL
    return template.format(dish_name=dish_name, pairing=pairing)
