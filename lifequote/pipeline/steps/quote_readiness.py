"""
Step 4: Quote Readiness
Decides when a profile can be quoted and fills the gaps with defaults.
"""

from typing import List, Optional

from lifequote.exceptions import ProfileNotReadyError
from lifequote.pipeline.models import Profile, QuoteRequest
from lifequote.pipeline.steps.coverage_estimation import CoverageEstimationStep


class QuoteReadinessStep:
    """
    A profile is quotable once age and income are known. Everything else
    falls back to the defaults below.
    """

    REQUIRED_FIELDS = ("age", "income")

    DEFAULT_GENDER = "male"
    DEFAULT_SMOKER = False
    DEFAULT_STATE = "NY"
    DEFAULT_HEALTH_CLASS = "preferred"
    DEFAULT_TERM = 20

    def __init__(self, coverage_step: Optional[CoverageEstimationStep] = None):
        self.coverage_step = coverage_step or CoverageEstimationStep()

    def missing_fields(self, profile: Profile) -> List[str]:
        """Required fields the profile does not have yet."""
        return [name for name in self.REQUIRED_FIELDS if not getattr(profile, name)]

    def is_ready(self, profile: Profile) -> bool:
        """True when both age and income are present."""
        return not self.missing_fields(profile)

    def execute(self, profile: Profile, term: Optional[int] = None) -> QuoteRequest:
        """
        Build the quote request for a ready profile.

        Args:
            profile: Profile with at least age and income
            term: Term length override in years

        Returns:
            QuoteRequest with defaults applied

        Raises:
            ProfileNotReadyError: If age or income is missing
        """
        missing = self.missing_fields(profile)
        if missing:
            raise ProfileNotReadyError(missing)

        return QuoteRequest(
            age=profile.age,
            gender=profile.gender or self.DEFAULT_GENDER,
            smoker=profile.smoker or self.DEFAULT_SMOKER,
            coverage_amount=self.coverage_step.execute(profile),
            term=term or self.DEFAULT_TERM,
            state=profile.state or self.DEFAULT_STATE,
            health_class=self.DEFAULT_HEALTH_CLASS,
        )
