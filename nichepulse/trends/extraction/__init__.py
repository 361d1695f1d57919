"""Format extraction: LLM tiers, JSON parsing and static defaults."""

from .extractor import ExtractionOutcome, ExtractionTier, FormatExtractor
from .json_extract import ExtractionResult, extract_json_array

__all__ = [
    "ExtractionOutcome",
    "ExtractionTier",
    "FormatExtractor",
    "ExtractionResult",
    "extract_json_array",
]
