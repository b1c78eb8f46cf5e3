"""
Step 5: Quote Generation
Prices a quote request against the mock carrier panel.
"""

import math
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from lifequote.pipeline.models import CarrierQuote, QuoteRequest


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class QuoteGenerationStep:
    """
    Produces term-life offers from a fixed panel of carriers. Rates are
    expressed per $1,000 of coverage per month.
    """

    QUOTE_VALIDITY = timedelta(days=30)

    PANEL_BASE_RATE = 0.12
    PANEL_CARRIERS = (
        ("Prudential", 1.0),
        ("MetLife", 1.05),
        ("New York Life", 0.95),
        ("Northwestern Mutual", 1.1),
        ("MassMutual", 1.02),
    )

    SBLI_BASE_RATE = 0.08

    def __init__(self, include_sbli: bool = True):
        self.include_sbli = include_sbli

    def panel_rate(self, age: int, smoker: bool) -> float:
        """Monthly rate per $1,000 for the carrier panel."""
        rate = self.PANEL_BASE_RATE
        if age < 25:
            rate -= 0.02
        elif age > 30:
            rate += (age - 30) * 0.015

        if smoker:
            rate *= 2.5
        return rate

    def sbli_rate(self, age: int, smoker: bool) -> float:
        """Monthly rate per $1,000 for SBLI."""
        smoker_factor = 2.0 if smoker else 1.0
        return self.SBLI_BASE_RATE * smoker_factor * (1 + (age - 25) * 0.01)

    def execute(
        self,
        request: QuoteRequest,
        now: Optional[datetime] = None
    ) -> List[CarrierQuote]:
        """
        Generate quotes for every carrier.

        Args:
            request: Structured quote request
            now: Generation time (defaults to current UTC time)

        Returns:
            Quotes sorted by monthly premium, cheapest first
        """
        now = now or datetime.utcnow()
        expires_at = now + self.QUOTE_VALIDITY
        units = request.coverage_amount / 1000

        quotes = []
        rate = self.panel_rate(request.age, request.smoker)
        for carrier, multiplier in self.PANEL_CARRIERS:
            monthly = _round_half_up(units * rate * multiplier)
            quotes.append(CarrierQuote(
                carrier=carrier,
                monthly_premium=monthly,
                annual_premium=monthly * 12,
                coverage_amount=request.coverage_amount,
                term=request.term,
                product_name=f"{request.term}-Year Term Life",
                quote_id=f"mock-{uuid.uuid4().hex[:12]}",
                expires_at=expires_at,
                details={"mock": True, "carrier_name": carrier},
            ))

        if self.include_sbli:
            monthly = _round_half_up(units * self.sbli_rate(request.age, request.smoker))
            quotes.append(CarrierQuote(
                carrier="SBLI",
                monthly_premium=monthly,
                annual_premium=monthly * 12,
                coverage_amount=request.coverage_amount,
                term=request.term,
                product_name=f"SBLI {request.term}-Year Term",
                quote_id=f"sbli-{uuid.uuid4().hex[:12]}",
                expires_at=expires_at,
                details={"mock": True, "carrier_name": "SBLI", "competitive_rate": True},
            ))

        return sorted(quotes, key=lambda q: q.monthly_premium)

    def best_quote(self, request: QuoteRequest) -> Optional[CarrierQuote]:
        """Return the cheapest quote, or None when nothing could be priced."""
        quotes = self.execute(request)
        return quotes[0] if quotes else None
