"""
Function-style entry points to the profile engine.
Thin wrappers over shared, stateless step instances.
"""

from typing import Optional

from lifequote.pipeline.models import Profile, QuoteRequest
from lifequote.pipeline.steps import (
    CompletenessScoringStep,
    CoverageEstimationStep,
    ProfileExtractionStep,
    QuoteReadinessStep,
)


_extraction = ProfileExtractionStep()
_coverage = CoverageEstimationStep()
_completeness = CompletenessScoringStep()
_readiness = QuoteReadinessStep(_coverage)


def extract_profile(conversation_text: str, current_profile: Optional[Profile] = None) -> Profile:
    """Merge facts found in the conversation text into a copy of the profile."""
    return _extraction.execute(conversation_text, current_profile)


def estimate_coverage(profile: Profile) -> int:
    """Recommended face value, a multiple of 25,000 and at least 250,000."""
    return _coverage.execute(profile)


def score_completeness(profile: Profile) -> int:
    """Weighted percentage of the profile that has been filled in."""
    return _completeness.execute(profile)


def is_ready_for_quotes(profile: Profile) -> bool:
    return _readiness.is_ready(profile)


def build_quote_request(profile: Profile, term: Optional[int] = None) -> QuoteRequest:
    return _readiness.execute(profile, term)
