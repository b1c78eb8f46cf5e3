"""
Tests for mock carrier pricing.
"""

from datetime import datetime, timedelta

import pytest
from lifequote.pipeline.models import QuoteRequest
from lifequote.pipeline.steps import QuoteGenerationStep


@pytest.fixture
def request_30():
    """Non-smoking 30 year old asking for $500k."""
    return QuoteRequest(age=30, coverage_amount=500000)


class TestQuoteGeneration:
    """Tests for the quote generation step."""

    def test_panel_and_sbli_prices(self, request_30):
        quotes = QuoteGenerationStep().execute(request_30)
        prices = {q.carrier: q.monthly_premium for q in quotes}

        assert prices == {
            "SBLI": 42,
            "New York Life": 57,
            "Prudential": 60,
            "MassMutual": 61,
            "MetLife": 63,
            "Northwestern Mutual": 66,
        }

    def test_sorted_cheapest_first(self, request_30):
        quotes = QuoteGenerationStep().execute(request_30)
        premiums = [q.monthly_premium for q in quotes]

        assert premiums == sorted(premiums)

    def test_annual_is_twelve_months(self, request_30):
        for quote in QuoteGenerationStep().execute(request_30):
            assert quote.annual_premium == quote.monthly_premium * 12

    def test_quote_fields(self, request_30):
        now = datetime(2024, 1, 1, 12, 0, 0)
        quotes = QuoteGenerationStep().execute(request_30, now=now)

        for quote in quotes:
            assert quote.coverage_amount == 500000
            assert quote.term == 20
            assert quote.expires_at == now + timedelta(days=30)
            assert quote.details["mock"] is True

        sbli = next(q for q in quotes if q.carrier == "SBLI")
        assert sbli.quote_id.startswith("sbli-")
        assert sbli.product_name == "SBLI 20-Year Term"

        prudential = next(q for q in quotes if q.carrier == "Prudential")
        assert prudential.quote_id.startswith("mock-")
        assert prudential.product_name == "20-Year Term Life"

    def test_quote_ids_unique(self, request_30):
        quotes = QuoteGenerationStep().execute(request_30)
        assert len({q.quote_id for q in quotes}) == len(quotes)

    def test_without_sbli(self, request_30):
        quotes = QuoteGenerationStep(include_sbli=False).execute(request_30)

        assert len(quotes) == 5
        assert "SBLI" not in {q.carrier for q in quotes}

    def test_smokers_pay_more(self):
        step = QuoteGenerationStep()
        smoker = step.execute(QuoteRequest(age=45, smoker=True, coverage_amount=500000))
        non_smoker = step.execute(QuoteRequest(age=45, coverage_amount=500000))

        smoker_prices = {q.carrier: q.monthly_premium for q in smoker}
        for quote in non_smoker:
            assert smoker_prices[quote.carrier] > quote.monthly_premium

    def test_panel_rate_by_age(self):
        step = QuoteGenerationStep()

        assert step.panel_rate(22, False) == pytest.approx(0.10)
        assert step.panel_rate(28, False) == pytest.approx(0.12)
        assert step.panel_rate(40, False) == pytest.approx(0.27)
        assert step.panel_rate(40, True) == pytest.approx(0.675)

    def test_best_quote(self, request_30):
        best = QuoteGenerationStep().best_quote(request_30)

        assert best.carrier == "SBLI"
        assert best.monthly_premium == 42
