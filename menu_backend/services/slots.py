"""
Personal recommendation slots per daypart.

Two dishes are picked from the ranked regular menu. Week specials are shown
elsewhere and drinks never take a food slot, including in the fallback fill.
"""
import logging
from typing import Callable, Iterable, Optional, Sequence

from menu_backend.schemas.menu import Context, Daypart, Dish, UserProfile
from menu_backend.services.matching import is_beverage
from menu_backend.services.ranking import rank_dishes

logger = logging.getLogger(__name__)

SLOT_COUNT = 2

BREAKFAST_CATEGORIES = ("breakfast", "ontbijt")
LUNCH_CATEGORIES = ("lunch",)
DINNER_CATEGORIES = ("main", "diner", "dinner", "hoofdgerecht", "entree")
APERITIF_CATEGORIES = ("borrel", "aperitif")
STARTER_CATEGORIES = ("starter", "voorgerecht", "appetizer")

SANDWICH_WORDS = ("tosti", "broodje", "sandwich")
BREAKFAST_WORDS = ("ontbijt", "breakfast")
SNACK_WORDS = ("borrel", "hapje")
STARTER_WORDS = ("soep", "salade", "voorgerecht")


def _fields(dish: Dish) -> tuple[str, str, list[str]]:
    return dish.category.lower(), dish.name.lower(), [t.lower() for t in dish.tags]


def _has(name: str, words) -> bool:
    return any(word in name for word in words)


def _is_daytime_item(dish: Dish) -> bool:
    """Lunch or breakfast items, kept out of the evening slots"""
    category, name, tags = _fields(dish)
    return (
        category in LUNCH_CATEGORIES + BREAKFAST_CATEGORIES
        or _has(name, SANDWICH_WORDS + BREAKFAST_WORDS)
        or any(t in tags for t in ("lunch", "ontbijt", "breakfast"))
    )


def is_starter(dish: Dish) -> bool:
    if _is_daytime_item(dish):
        return False
    category, name, _ = _fields(dish)
    return category in STARTER_CATEGORIES or _has(name, STARTER_WORDS)


def is_main(dish: Dish) -> bool:
    if _is_daytime_item(dish):
        return False
    category, name, _ = _fields(dish)
    return category in DINNER_CATEGORIES or not _has(name, STARTER_WORDS + ("dessert",))


def is_aperitif_snack(dish: Dish) -> bool:
    category, name, tags = _fields(dish)
    if (
        category in DINNER_CATEGORIES + LUNCH_CATEGORIES + BREAKFAST_CATEGORIES
        or _has(name, SANDWICH_WORDS + BREAKFAST_WORDS)
        or any(t in tags for t in ("diner", "dinner", "lunch", "ontbijt", "breakfast"))
    ):
        return False
    return (
        category in APERITIF_CATEGORIES + ("starter", "side")
        or any(t in tags for t in ("borrel", "snack"))
        or _has(name, SNACK_WORDS + ("bitterbal", "kaas", "worst", "olijf"))
    )


def is_breakfast_item(dish: Dish) -> bool:
    category, name, tags = _fields(dish)
    if (
        category in DINNER_CATEGORIES + LUNCH_CATEGORIES + APERITIF_CATEGORIES
        or _has(name, SANDWICH_WORDS + SNACK_WORDS)
        or any(t in tags for t in ("diner", "dinner", "lunch", "borrel"))
    ):
        return False
    return (
        category in BREAKFAST_CATEGORIES
        or any(t in tags for t in BREAKFAST_WORDS)
        or _has(name, BREAKFAST_WORDS + ("brood", "ei", "pancake", "wafel"))
    )


def is_lunch_item(dish: Dish) -> bool:
    category, name, tags = _fields(dish)
    if (
        category in DINNER_CATEGORIES + BREAKFAST_CATEGORIES + APERITIF_CATEGORIES
        or _has(name, BREAKFAST_WORDS + SNACK_WORDS)
        or any(t in tags for t in ("diner", "dinner", "ontbijt", "breakfast", "borrel"))
    ):
        return False
    return (
        category in LUNCH_CATEGORIES
        or any(t in tags for t in ("lunch", "middag"))
        or _has(name, ("lunch", "middag", "sandwich", "salade", "soep", "pasta", "tosti", "broodje"))
    )


DAYPART_FILTERS: dict[Daypart, Callable[[Dish], bool]] = {
    Daypart.APERITIF: is_aperitif_snack,
    Daypart.BREAKFAST: is_breakfast_item,
    Daypart.LUNCH: is_lunch_item,
}


def _fill(picks: list[Dish], candidates: Iterable[Dish]) -> list[Dish]:
    for dish in candidates:
        if len(picks) >= SLOT_COUNT:
            break
        if dish.id in {p.id for p in picks} or is_beverage(dish):
            continue
        picks.append(dish)
    return picks


def _dinner_picks(ranked: Sequence[Dish]) -> list[Dish]:
    picks = []
    starter = next((d for d in ranked if is_starter(d)), None)
    if starter is not None:
        picks.append(starter)
    main = next((d for d in ranked if is_main(d) and d not in picks), None)
    if main is not None:
        picks.append(main)
    return picks


def fill_daypart_slots(
    dishes: Sequence[Dish],
    user: UserProfile,
    context: Context,
    week_ids: Optional[Iterable[str]] = None,
) -> list[Dish]:
    """Pick up to two recommendations for the current daypart.

    `week_ids` lists the week specials to leave out; by default every dish
    flagged `is_week` is left out.
    """
    excluded = set(week_ids) if week_ids is not None else {d.id for d in dishes if d.is_week}
    food = [d for d in dishes if d.id not in excluded and not is_beverage(d)]
    ranked = rank_dishes(food, user, context)

    if context.daypart == Daypart.DINNER:
        picks = _dinner_picks(ranked)
    else:
        allowed = DAYPART_FILTERS.get(context.daypart, lambda dish: True)
        picks = [d for d in ranked if allowed(d)][:SLOT_COUNT]

    picks = _fill(picks, ranked)
    logger.debug(f"{context.daypart.value} recommendations: {[d.name for d in picks]}")
    return picks[:SLOT_COUNT]
