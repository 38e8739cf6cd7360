"""
Dish ranking for a guest profile.
Scores only reorder the catalog: every input dish is returned.
"""
from typing import Optional, Sequence

from menu_backend.schemas.menu import Context, Dish, UserProfile
from menu_backend.services.matching import (
    LIGHT_FRESH,
    RICH_HEARTY,
    SURPRISING_FULL,
    matches_diet,
    tags_in_family,
    taste_to_code,
)

BASE_SCORE = 1
DIET_MATCH_BONUS = 3
DIET_MISMATCH_PENALTY = -1
TASTE_MATCH_BONUS = 2
TASTE_OPPOSITE_PENALTY = -1
FEATURED_VEG_BONUS = 100

FEATURED_VEG_NAMES = ("vegetarische hap", "vegetarian dish")

# taste code -> (families that earn the bonus, families that earn the penalty)
TASTE_RULES = {
    LIGHT_FRESH: ((LIGHT_FRESH,), (RICH_HEARTY,)),
    RICH_HEARTY: ((RICH_HEARTY,), (LIGHT_FRESH,)),
    SURPRISING_FULL: ((SURPRISING_FULL, RICH_HEARTY), ()),
}


def score_dish(dish: Dish, user: UserProfile, taste_code: Optional[str] = None) -> int:
    if taste_code is None:
        taste_code = taste_to_code(user.taste)

    score = BASE_SCORE

    if user.diet == "veg" and any(n in dish.name.lower() for n in FEATURED_VEG_NAMES):
        score += FEATURED_VEG_BONUS

    score += DIET_MATCH_BONUS if matches_diet(dish, user.diet) else DIET_MISMATCH_PENALTY

    bonus_families, penalty_families = TASTE_RULES.get(taste_code, ((), ()))
    for family in bonus_families:
        if tags_in_family(dish.tags, family):
            score += TASTE_MATCH_BONUS
    for family in penalty_families:
        if tags_in_family(dish.tags, family):
            score += TASTE_OPPOSITE_PENALTY

    return score


def rank_scored(
    dishes: Sequence[Dish],
    user: UserProfile,
    context: Optional[Context] = None,
) -> list[tuple[Dish, int]]:
    """(dish, score) pairs, best first; equal scores keep catalog order"""
    taste_code = taste_to_code(user.taste)
    scored = [(dish, score_dish(dish, user, taste_code)) for dish in dishes]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


def rank_dishes(
    dishes: Sequence[Dish],
    user: UserProfile,
    context: Optional[Context] = None,
) -> list[Dish]:
    """Order dishes for the guest. The context is accepted so callers can pass
    the session context through; daypart weighting happens in the slot filler.
    """
    return [dish for dish, _ in rank_scored(dishes, user, context)]
