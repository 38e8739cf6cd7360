"""
Dictionary translation Dutch -> English for dish and category text.
Used when neither the sheet nor the LLM supplies an English text.
"""
import logging
import re

logger = logging.getLogger(__name__)

TRANSLATIONS = {
    # Menu categories
    "Hoofdgerecht": "Main Course",
    "Voorgerecht": "Starter",
    "Lunch": "Lunch",
    "Ontbijt": "Breakfast",
    "Dessert": "Dessert",
    "Borrel": "Aperitif",
    "Drank": "Drink",
    "Gerecht": "Dish",

    # Food types
    "Vlees": "Meat",
    "Vis": "Fish",
    "Vega": "Vegetarian",
    "Vegetarisch": "Vegetarian",

    # Taste profiles
    "Rijk & Hartig": "Rich & Hearty",
    "Licht & Fris": "Light & Fresh",
    "Verrassend & Vol": "Surprising & Full",

    # Preparation
    "gebakken": "baked",
    "gegrild": "grilled",
    "gekookt": "boiled",
    "gerookt": "smoked",
    "gestoomd": "steamed",
    "gebraden": "roasted",
    "gefrituurd": "fried",
    "gekruid": "seasoned",
    "gemarineerd": "marinated",
    "geserveerd": "served",
    "gegarnierd": "garnished",
    "vers": "fresh",
    "warme": "warm",
    "koude": "cold",
    "met": "with",
    "en": "and",
    "op": "on",
    "van": "of",
    "uit": "from",

    # Dishes
    "Caesar salade": "Caesar salad",
    "Franse uien soep": "French onion soup",
    "Biefstuk": "Steak",
    "Zeebaars": "Sea bass",
    "Gamba's": "Shrimp",
    "Ossenhaas": "Beef tenderloin",
    "Tartaar": "Tartare",

    # Drinks
    "Wijn": "Wine",
    "Bier": "Beer",
    "Koffie": "Coffee",
    "Thee": "Tea",
    "Sap": "Juice",
    "Likeur": "Liqueur",

    # Vegetables and sides
    "Tomaten": "Tomatoes",
    "Sla": "Lettuce",
    "Komkommer": "Cucumber",
    "Ui": "Onion",
    "Knoflook": "Garlic",
    "Wortelen": "Carrots",
    "Aardappelen": "Potatoes",
    "Rijst": "Rice",

    # Sauces
    "Saus": "Sauce",
    "Botersaus": "Butter sauce",
    "Citroenboter": "Lemon butter",
    "Knoflooksaus": "Garlic sauce",
    "Mosterd": "Mustard",
    "Mayonaise": "Mayonnaise",
    "Olijfolie": "Olive oil",

    # Herbs and spices
    "Zout": "Salt",
    "Peper": "Pepper",
    "Basilicum": "Basil",
    "Peterselie": "Parsley",
    "Tijm": "Thyme",
    "Rozemarijn": "Rosemary",
    "Laurier": "Bay leaf",
    "Kaneel": "Cinnamon",
    "Gember": "Ginger",
}

_LOOKUP = {dutch.lower(): english for dutch, english in TRANSLATIONS.items()}
# Longest phrases first so "Caesar salade" wins over its parts
_PHRASE_RE = re.compile(
    r"\b(" + "|".join(re.escape(k) for k in sorted(_LOOKUP, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)
_DUTCH_CHARS_RE = re.compile(r"[ëöüäï]")


def _match_case(source: str, target: str) -> str:
    if source[:1].isupper():
        return target[:1].upper() + target[1:]
    return target[:1].lower() + target[1:]


def translate_text(text: str, lang: str = "en") -> str:
    """Phrase-by-phrase translation; text that keeps Dutch characters is
    returned unchanged rather than half translated.
    """
    if not text or lang == "nl":
        return text or ""

    exact = _LOOKUP.get(text.strip().lower())
    if exact:
        return exact

    translated = _PHRASE_RE.sub(lambda m: _match_case(m.group(0), _LOOKUP[m.group(0).lower()]), text)
    if _DUTCH_CHARS_RE.search(translated.lower()):
        logger.info(f"Unhandled Dutch text kept as is: {text!r}")
        return text
    return translated


# Card labels for the category tokens used in the sheet
CATEGORY_LABELS = {
    "nl": {
        "main": "Hoofdgerecht",
        "diner": "Hoofdgerecht",
        "vlees": "Hoofdgerecht",
        "vis": "Hoofdgerecht",
        "vega": "Hoofdgerecht",
        "salade": "Hoofdgerecht",
        "starter": "Voorgerecht",
        "voorgerecht": "Voorgerecht",
        "soep": "Voorgerecht",
        "side": "Bijgerecht",
        "dessert": "Dessert",
        "ontbijt": "Ontbijt",
        "lunch": "Lunch",
        "borrel": "Borrel",
        "drank": "Drank",
    },
    "en": {
        "main": "Main course",
        "diner": "Main course",
        "vlees": "Main course",
        "vis": "Main course",
        "vega": "Main course",
        "salade": "Main course",
        "starter": "Starter",
        "voorgerecht": "Starter",
        "soep": "Starter",
        "side": "Side dish",
        "dessert": "Dessert",
        "ontbijt": "Breakfast",
        "lunch": "Lunch",
        "borrel": "Snacks",
        "drank": "Drink",
    },
}


def translate_category(category: str, lang: str = "en") -> str:
    """Card label for a category token ("main") or a Dutch category word"""
    lang = "nl" if lang == "nl" else "en"
    if not category:
        return "Gerecht" if lang == "nl" else "Dish"
    key = category.strip().lower()
    label = CATEGORY_LABELS[lang].get(key)
    if label:
        return label
    if lang == "nl":
        return category
    return _LOOKUP.get(key, "Dish")
