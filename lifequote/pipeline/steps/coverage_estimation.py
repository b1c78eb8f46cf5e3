"""
Step 2: Coverage Estimation
Recommends a term-life face value from the profile.
"""

from lifequote.pipeline.models import Profile


class CoverageEstimationStep:
    """
    Income-replacement needs analysis: a multiple of income, plus debts,
    final expenses and a per-dependent allowance, floored and rounded to a
    clean quoting amount.
    """

    DEFAULT_INCOME_NEED = 400_000
    FINAL_EXPENSES = 30_000
    PER_DEPENDENT = 150_000
    MINIMUM_COVERAGE = 250_000
    ROUNDING_STEP = 25_000

    def income_multiplier(self, dependents: int) -> int:
        """Years of income to replace, by number of dependents."""
        if dependents > 1:
            return 12
        if dependents == 1:
            return 10
        return 8

    def execute(self, profile: Profile) -> int:
        """
        Calculate the recommended coverage amount.

        Args:
            profile: Current profile (may be empty)

        Returns:
            Coverage in dollars, a multiple of 25,000 and at least 250,000
        """
        dependents = profile.dependents or 0

        if profile.income:
            need = profile.income * self.income_multiplier(dependents)
        else:
            need = self.DEFAULT_INCOME_NEED

        need += (profile.mortgage or 0) + (profile.student_loans or 0)
        need += self.FINAL_EXPENSES

        if dependents > 0:
            need += dependents * self.PER_DEPENDENT

        need = max(need, self.MINIMUM_COVERAGE)

        # Nearest step, halves round up
        return (need + self.ROUNDING_STEP // 2) // self.ROUNDING_STEP * self.ROUNDING_STEP
