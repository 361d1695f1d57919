"""
Static fallback formats.

Three evergreen formats, with the "how to apply" examples filled in from a
per-niche table. Used when there are no videos or every LLM tier failed.
"""

from types import MappingProxyType
from typing import Mapping

from ..models import AvgStats, EngagementLevel, TrendingFormat
from ..niches import match_niche_key


# niche -> (transformation examples, day-in-life examples, grwm examples)
NICHE_EXAMPLES: Mapping[str, tuple[tuple[str, ...], tuple[str, ...], tuple[str, ...]]] = MappingProxyType({
    "hijab": (
        ("Plain outfit to a fully styled modest look", "One scarf, three different wraps", "Beginner wrap vs. the wrap you do now"),
        ("A day as a hijabi student or professional", "Outfit check at every stop of the day", "Styling for work, then for an evening event"),
        ("GRWM for Jummah", "Modest makeup and hijab styling", "Getting ready for Eid"),
    ),
    "deen": (
        ("Your Quran journal on day 1 vs. day 100", "Prayer space before and after a makeover", "How your routine changed after a habit challenge"),
        ("A day built around the five prayers", "Morning adhkar to evening reflection", "A productive day with prayer times as anchors"),
        ("GRWM for the masjid", "Getting ready for a halaqa while sharing a reminder", "Preparing for taraweeh"),
    ),
    "cultural": (
        ("Empty table to a full Eid spread", "Home before and after Ramadan decorations", "Raw fabric to a finished traditional outfit"),
        ("A day in Ramadan from suhoor to iftar", "Eid morning from start to finish", "A day visiting family during the holidays"),
        ("GRWM for Eid prayer", "Getting ready for a family wedding", "Traditional outfit styling while telling the story behind it"),
    ),
    "food": (
        ("Raw ingredients to a finished halal dish", "Leftovers turned into a new meal", "Store-bought vs. homemade side by side"),
        ("What I eat in a day (halal edition)", "Iftar prep from shopping to serving", "A day of meal prep for the week"),
        ("Get ready with me to host dinner", "Prep the kitchen while explaining the menu", "Getting ready for a food market visit"),
    ),
    "gym": (
        ("Week 1 vs. week 12 progress", "Modest activewear styled three ways", "First attempt vs. latest attempt at a lift"),
        ("A training day around prayer times", "Fasting and training in Ramadan", "Home workout day from warm-up to cool-down"),
        ("GRWM for the gym in modest activewear", "Pack the gym bag while sharing the plan", "Pre-workout routine and mindset"),
    ),
    "pets": (
        ("Rescue day vs. one year later", "Messy pet corner to an organized setup", "Grooming before and after"),
        ("A day with my cats", "Morning routine with a pet", "What my pet does while I work"),
        ("Get ready with me while my pet interrupts", "Vet visit prep", "Getting the pet ready for guests"),
    ),
    "storytelling": (
        ("Who I was then vs. who I am now", "The moment everything changed, told in two parts", "Old photo to present-day reveal"),
        ("A day that changed my life, retold", "Story time over a normal day's footage", "Narrated day with a twist at the end"),
        ("GRWM while telling a story", "Storytime while doing skincare", "Getting ready and answering a viewer question"),
    ),
    "fitness": (
        ("Day 1 vs. day 90 progress", "Form check before and after coaching", "Starting point to a personal record"),
        ("A full training day", "What I eat on a training day", "Rest day routine"),
        ("GRWM for a workout", "Gym bag essentials while getting ready", "Pre-workout routine and playlist-free hype talk"),
    ),
    "beauty": (
        ("Bare face to full look", "Drugstore vs. high-end result", "Skin journey month by month"),
        ("A day of skincare from AM to PM", "Touch-ups throughout a workday", "Product testing over a full day"),
        ("GRWM for a night out", "GRWM while reviewing a new product", "Five-minute makeup routine"),
    ),
    "default": (
        ("Starting point to finished result", "Messy to organized", "Beginner attempt vs. current skill"),
        ("A day in your life around your craft", "Behind the scenes of a busy day", "A productive day from start to finish"),
        ("GRWM while sharing a tip", "Getting ready for a big moment", "Prep routine while answering questions"),
    ),
})


def _examples_for(niche: str) -> tuple[tuple[str, ...], tuple[str, ...], tuple[str, ...]]:
    key = match_niche_key(niche, NICHE_EXAMPLES) or "default"
    if key == "default" and niche:
        # Unknown niche: keep the generic examples but name the niche in them.
        topic = niche.strip()
        return tuple(
            tuple(f"{example} ({topic})" for example in group)
            for group in NICHE_EXAMPLES["default"]
        )
    return NICHE_EXAMPLES[key]


def default_formats(niche: str) -> list[TrendingFormat]:
    """
    Three fallback formats for a niche. Pure; no I/O.
    """
    label = niche.strip() or "your niche"
    transformation, day_in_life, grwm = _examples_for(niche)

    return [
        TrendingFormat(
            id="default-1",
            format_name="Before & After Transformation",
            format_description=(
                f"Show a dramatic transformation from start to finish. Works for any {label} skill, "
                "project or journey."
            ),
            why_it_works=(
                "Creates curiosity and satisfaction. Viewers stay to see the end result and the "
                "journey motivates them."
            ),
            how_to_apply=list(transformation),
            engagement_potential=EngagementLevel.HIGH,
            avg_stats=AvgStats(views="500K-2M", likes="50K-200K", shares="5K-20K"),
        ),
        TrendingFormat(
            id="default-2",
            format_name="Day in My Life",
            format_description=(
                f"Document a real day as a {label} creator from morning to evening. Viewers love "
                "authentic everyday content."
            ),
            why_it_works=(
                "Builds a personal connection. Viewers feel like they know you, which makes the "
                "content highly shareable."
            ),
            how_to_apply=list(day_in_life),
            engagement_potential=EngagementLevel.HIGH,
            avg_stats=AvgStats(views="300K-1M", likes="30K-100K", shares="3K-15K"),
        ),
        TrendingFormat(
            id="default-3",
            format_name="Get Ready With Me (GRWM)",
            format_description=(
                "Film yourself getting ready while talking to the camera. Combine preparation "
                f"with {label} conversation."
            ),
            why_it_works=(
                "An intimate format that builds connection. Viewers feel like they are hanging out "
                "with a friend."
            ),
            how_to_apply=list(grwm),
            engagement_potential=EngagementLevel.MEDIUM,
            avg_stats=AvgStats(views="400K-1.5M", likes="40K-150K", shares="4K-18K"),
        ),
    ]
