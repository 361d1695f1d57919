"""
Niche lookup tables and the hashtag resolver.

Tables are read-only and built once at import. Declaration order matters:
the substring scan walks niches in this order, so earlier niches shadow
later ones when a query matches more than one key.
"""

import re
from types import MappingProxyType
from typing import Mapping

from .models import NicheProfile


NICHE_HASHTAGS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "hijab": ("hijabtutorial", "hijabstyle", "modestfashion", "hijabfashion", "muslimfashion"),
    "deen": ("islamicreminders", "muslim", "quran", "islamicquotes", "deenoverdunya"),
    "cultural": ("ramadan", "eid", "muslimlife", "muslimculture", "eidmubarak"),
    "food": ("halalfood", "halaleats", "iftarrecipes", "muslimfoodie", "halalrecipes"),
    "gym": ("muslimfitness", "hijabifitness", "modestworkout", "fitmuslimah", "ramadanfitness"),
    "pets": ("muslimswithcats", "catsofislam", "catlovers", "muslimcat", "petsofmuslims"),
    "storytelling": ("storytime", "muslimstory", "revertmuslim", "myjourney", "islamicstories"),
    "fitness": ("fitness", "workout", "gymtok", "fitnessmotivation", "homeworkout"),
    "beauty": ("makeuptutorial", "skincare", "grwm", "beautytok", "makeuphacks"),
    "tech": ("techtok", "techreview", "gadgets", "techtips", "coding"),
    "finance": ("moneytok", "personalfinance", "investing", "budgeting", "financetips"),
    "travel": ("traveltok", "travel", "traveltips", "hiddengems", "wanderlust"),
    "parenting": ("momtok", "parenting", "dadtok", "parentinghacks", "momlife"),
    "education": ("learnontiktok", "studytok", "studytips", "edutok", "didyouknow"),
})

# Generic hashtags for niches the table does not know.
DEFAULT_HASHTAGS: tuple[str, ...] = (
    "fyp", "viral", "trending", "foryoupage",
    "transformation", "storytime", "grwm",
    "tutorial", "dayinmylife",
)

NICHE_PROFILES: Mapping[str, NicheProfile] = MappingProxyType({
    key: NicheProfile(key=key, hashtags=tags) for key, tags in NICHE_HASHTAGS.items()
})

# Curated Instagram creator accounts per niche
NICHE_CREATORS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "hijab": ("hijabfashion", "modestfashionweek", "modesty", "hijabstyle", "modeststreetfashion"),
    "deen": ("islamicreminders", "onepathnetwork", "muslimcentral", "islamicquotes_", "quranrecitation"),
    "cultural": ("muslimgirl", "hejabnista", "muslimahlifestyle", "islamicart", "arabesque.life"),
    "food": ("halalfoodguide", "halalgirlsknow", "halalfoodhunt", "muslimfoodie", "modesthalalfood"),
    "gym": ("hijabifitness", "modestactivewear", "muslimwomenwholift", "hijabworkout", "fitmuslimah"),
    "pets": ("muslimswithcats", "halalcatmom", "muslimandpets"),
    "storytelling": ("muslimwomensday", "muslimstories", "hijabistorytime", "muslimlifestyle"),
})

DEFAULT_CREATOR_NICHE = "deen"


def normalize_niche(niche: str) -> str:
    return (niche or "").strip().lower()


def slugify_hashtag(niche: str) -> str:
    """Turn free text into a hashtag token: lowercase letters and digits only."""
    return re.sub(r"[^a-z0-9]", "", normalize_niche(niche))


def match_niche_key(niche: str, table: Mapping[str, object]) -> str | None:
    """
    Find the table key for a niche.

    Exact match first, then the first key (in declaration order) that
    contains the niche or is contained by it.
    """
    normalized = normalize_niche(niche)
    if not normalized:
        return None

    if normalized in table:
        return normalized

    for key in table:
        if key in normalized or normalized in key:
            return key

    return None


def resolve_niche(niche: str) -> NicheProfile:
    """Resolve a niche to its profile, synthesizing one for unknown niches."""
    key = match_niche_key(niche, NICHE_PROFILES)
    if key is not None:
        return NICHE_PROFILES[key]

    slug = slugify_hashtag(niche)
    if not slug:
        return NicheProfile(key="", hashtags=DEFAULT_HASHTAGS)

    hashtags = (slug,) + tuple(tag for tag in DEFAULT_HASHTAGS if tag != slug)
    return NicheProfile(key=slug, hashtags=hashtags)


def resolve_hashtags(niche: str) -> list[str]:
    """
    Map a niche to an ordered list of hashtags. Never fails.

    Args:
        niche: Free-text niche, e.g. "Hijab fashion"

    Returns:
        Hashtags without the leading '#'
    """
    return list(resolve_niche(niche).hashtags)


def resolve_creators(niche: str) -> list[str]:
    """Curated Instagram accounts for a niche, defaulting to the deen list."""
    key = match_niche_key(niche, NICHE_CREATORS) or DEFAULT_CREATOR_NICHE
    return list(NICHE_CREATORS[key])
