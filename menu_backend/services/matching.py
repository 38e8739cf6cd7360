"""
Diet and taste matching.

The keyword lists below are hand-maintained Dutch/English vocabularies taken
from the menu. The gluten-free check in particular is a best-effort heuristic,
not allergen information: dishes without an explicit gluten-free tag are
judged on words in their name and description only.
"""
import re

from menu_backend.schemas.menu import Dish

LIGHT_FRESH = "light_fresh"
RICH_HEARTY = "rich_hearty"
SURPRISING_FULL = "surprising_full"

KNOWN_TASTE_CODES = (LIGHT_FRESH, RICH_HEARTY, SURPRISING_FULL)

# A label maps to a code when it contains a word from both halves of the pair
TASTE_KEYWORDS = (
    (LIGHT_FRESH, ("licht", "light"), ("fris", "fresh")),
    (RICH_HEARTY, ("rijk", "rich"), ("hartig", "hearty")),
    (SURPRISING_FULL, ("verrassend", "surprising"), ("vol", "full")),
)

# Tag vocabulary per taste family, used for dish tags and pairing match_tags
TASTE_FAMILIES = {
    LIGHT_FRESH: ("licht", "fris", "light", "fresh"),
    RICH_HEARTY: ("rijk", "hartig", "rich", "hearty"),
    SURPRISING_FULL: ("verrassend", "vol", "surprising", "full"),
}

VEG_TYPES = ("vega", "vegetarisch", "vegetarian")
VEG_DIET_TAGS = ("veg", "v", "vega", "vegetarisch", "vegetarian")
VEGAN_TAGS = ("vegan", "vega")
GLUTEN_FREE_DIET_TAGS = ("glutfree", "glutenvrij", "glutenfree")
GLUTEN_FREE_TAGS = ("glutfree", "gf", "glutenvrij", "glutenfree")
MEAT_MARKERS = ("meat", "vlees")
FISH_MARKERS = ("fish", "vis")

GLUTEN_INGREDIENTS = (
    "boter", "kruidenboter", "citroenboter", "pasta", "brood", "meel", "bloem",
    "paneermeel", "sojasaus", "miso",
    "butter", "bread", "flour", "breadcrumb", "soy sauce",
)
NATURALLY_GLUTEN_FREE = (
    "salade", "vis", "vlees", "groente", "fruit", "rijst", "quinoa", "aardappel",
    "salad", "fish", "meat", "vegetable", "rice", "potato",
)

# Beverage denylist, matched as substrings of section/category/name
DRINK_CLASS_TOKENS = (
    "drank", "dranken", "drinken", "drink", "wijn", "bier", "cocktail", "bubbel",
    "beverage", "alcohol", "spirit", "wine", "beer", "coffee",
)
DRINK_NAME_TOKENS = (
    "hennessy", "cognac", "whisky", "whiskey", "wijn", "bier", "cocktail",
    "koffie", "espresso", "thee", "jus d'orange", "bobby's", "bombay",
    "vodka", "tequila", "champagne", "prosecco", "amstel", "radler", "cola",
    "fanta", "sprite", "water", "limonade", "sap", "juice", "drank", "drink",
    "bubbel", "sparkling", "mineraal", "frisdrank",
    # wine houses and grapes
    "casa silva", "pucari", "domaine", "château", "bordeaux", "burgundy",
    "pinot", "chardonnay", "sauvignon", "merlot", "cabernet", "syrah",
    "riesling", "gewürztraminer", "malbec", "tempranillo", "sangiovese", "barbera",
    # liqueurs and spirits
    "bailey's", "amaretto", "disaronno", "likeur", "liqueur", "brandy",
    "sherry", "vermouth", "aperitif", "digestif",
)
# Short tokens that would hit food words as substrings (steak, ginger, rumpsteak,
# portobello, cavatappi); these only match whole words.
DRINK_WORD_RE = re.compile(r"\b(?:tea|gin|rum|port|cava)\b")

_SYMBOLS_RE = re.compile(r"[^\w\s&]", re.UNICODE)


def taste_to_code(label: str) -> str:
    """Normalize a localized taste label to its canonical code.

    Labels that match none of the known keyword pairs come back slugified
    (lowercase, whitespace to underscores) and are treated as neutral by the
    ranker.
    """
    text = _SYMBOLS_RE.sub("", (label or "").lower()).strip()
    for code, first, second in TASTE_KEYWORDS:
        if any(word in text for word in first) and any(word in text for word in second):
            return code
    return re.sub(r"\s+", "_", text)


def _lower(values) -> list[str]:
    return [v.lower() for v in values or []]


def _contains_any(text: str, words) -> bool:
    return any(word in text for word in words)


def is_gluten_free(dish: Dish) -> bool:
    diet = _lower(dish.diet)
    tags = _lower(dish.tags)
    if any(t in diet for t in GLUTEN_FREE_DIET_TAGS) or any(t in tags for t in GLUTEN_FREE_TAGS):
        return True

    name = dish.name.lower()
    desc = dish.description.lower()
    if _contains_any(name, GLUTEN_INGREDIENTS) or _contains_any(desc, GLUTEN_INGREDIENTS):
        return False
    return _contains_any(name, NATURALLY_GLUTEN_FREE) or _contains_any(desc, NATURALLY_GLUTEN_FREE)


def is_vegetarian(dish: Dish) -> bool:
    return dish.type.lower() in VEG_TYPES or any(t in _lower(dish.diet) for t in VEG_DIET_TAGS)


def matches_diet(dish: Dish, diet_key: str) -> bool:
    """Whether a dish satisfies the guest's diet choice"""
    key = (diet_key or "").strip().lower()
    if not key or key == "all":
        return True

    diet = _lower(dish.diet)
    dish_type = dish.type.lower()

    if key == "veg":
        # lunch items rotate and are left out of the vegetarian selection
        if dish.category.lower() == "lunch":
            return False
        return is_vegetarian(dish)
    if key == "vegan":
        return any(t in diet for t in VEGAN_TAGS) or any(t in _lower(dish.tags) for t in VEGAN_TAGS)
    if key in ("glutfree", "glutenfree"):
        return is_gluten_free(dish)
    if key == "meat":
        return any(m in diet for m in MEAT_MARKERS) or dish_type in MEAT_MARKERS
    if key == "fish":
        return any(m in diet for m in FISH_MARKERS) or dish_type in FISH_MARKERS
    if key == "meatfish":
        markers = MEAT_MARKERS + FISH_MARKERS
        return any(m in diet for m in markers) or dish_type in markers
    return True


def tags_in_family(tags, code: str) -> bool:
    family = TASTE_FAMILIES.get(code, ())
    return any(tag in family for tag in _lower(tags))


def is_beverage(dish: Dish) -> bool:
    """Broad drink classifier; a hit keeps the item out of food slots"""
    section = dish.section.lower()
    category = dish.category.lower()
    name = dish.name.lower()

    for text in (section, category):
        if _contains_any(text, DRINK_CLASS_TOKENS) or DRINK_WORD_RE.search(text):
            return True
    return _contains_any(name, DRINK_NAME_TOKENS) or bool(DRINK_WORD_RE.search(name))


def passes_menu_filters(dish: Dish, vegetarian: bool = False, gluten_free: bool = False) -> bool:
    """Checkbox filters of the full menu; only explicit tags count here"""
    diet = _lower(dish.diet)
    tags = _lower(dish.tags)
    if vegetarian and not (any(t in diet for t in ("vega", "veg", "v", "vegetarisch")) or dish.type.lower() == "vega"):
        return False
    if gluten_free and not (any(t in diet for t in ("glutfree", "glutenvrij")) or any(t in tags for t in ("glutfree", "gf", "glutenvrij"))):
        return False
    return True
