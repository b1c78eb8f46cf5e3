"""
Pipeline steps for a chat turn.
Each step is a self-contained module that performs a specific task.
"""

from .profile_extraction import ProfileExtractionStep, build_conversation_text
from .coverage_estimation import CoverageEstimationStep
from .completeness import CompletenessScoringStep
from .quote_readiness import QuoteReadinessStep
from .quote_generation import QuoteGenerationStep

__all__ = [
    "ProfileExtractionStep",
    "build_conversation_text",
    "CoverageEstimationStep",
    "CompletenessScoringStep",
    "QuoteReadinessStep",
    "QuoteGenerationStep",
]
