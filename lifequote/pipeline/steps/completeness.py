"""
Step 3: Completeness Scoring
Scores how much of the profile has been gathered.
"""

from lifequote.pipeline.models import Profile


class CompletenessScoringStep:
    """
    Required fields carry 60 points split evenly and count when truthy.
    Optional fields carry 40 points split evenly and count whenever they are
    set at all, so ``smoker=False`` or ``dependents=0`` still score.
    """

    REQUIRED_FIELDS = ("age", "income", "gender", "state")
    OPTIONAL_FIELDS = ("smoker", "dependents", "marital_status", "mortgage", "student_loans")
    REQUIRED_WEIGHT = 0.6
    OPTIONAL_WEIGHT = 0.4

    def execute(self, profile: Profile) -> int:
        """Return the completeness percentage (0-100)."""
        required = sum(
            1 for name in self.REQUIRED_FIELDS if getattr(profile, name)
        )
        optional = sum(
            1 for name in self.OPTIONAL_FIELDS if getattr(profile, name) is not None
        )

        score = (
            required * self.REQUIRED_WEIGHT / len(self.REQUIRED_FIELDS)
            + optional * self.OPTIONAL_WEIGHT / len(self.OPTIONAL_FIELDS)
        )
        return int(score * 100 + 0.5)
