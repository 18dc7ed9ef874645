"""Unit tests for category aggregation."""

import pytest

from ingestion.lib.analysis.industry_aggregation import (
    UNKNOWN_CATEGORY,
    aggregate_totals,
    build_financial_summary,
    investments_by_type,
)
from ingestion.lib.models import Contribution, Expenditure, Investment


class TestAggregateTotals:
    def test_totals_are_conserved(self):
        pairs = [("Tech", 100.5), ("Oil", 20), ("Tech", 30), (None, 7), ("Finance", 0)]
        totals = aggregate_totals(pairs)
        assert sum(t.total for t in totals) == pytest.approx(157.5)
        assert sum(t.count for t in totals) == len(pairs)

    def test_sorted_descending(self):
        totals = aggregate_totals([("A", 1), ("B", 3), ("C", 2)])
        assert [t.category for t in totals] == ["B", "C", "A"]

    def test_ties_keep_first_seen_order(self):
        totals = aggregate_totals([("Zeta", 5), ("Alpha", 5), ("Mid", 5)])
        assert [t.category for t in totals] == ["Zeta", "Alpha", "Mid"]

    def test_top_n(self):
        pairs = [(str(i), i) for i in range(20)]
        totals = aggregate_totals(pairs, top_n=10)
        assert len(totals) == 10
        assert totals[0].category == "19"

    def test_blank_labels_are_unknown(self):
        totals = aggregate_totals([("", 1), ("   ", 2), (None, 3)])
        assert len(totals) == 1
        assert totals[0].category == UNKNOWN_CATEGORY
        assert totals[0].total == 6

    def test_labels_are_not_merged(self):
        totals = aggregate_totals([("Tech", 1), ("Technology", 1)])
        assert {t.category for t in totals} == {"Tech", "Technology"}

    def test_empty(self):
        assert aggregate_totals([]) == []


class TestFinancialSummary:
    def test_summary(self):
        contributions = [
            Contribution(amount=50_000, industry="Technology"),
            Contribution(amount=1_000, industry="Energy"),
            Contribution(amount=4_000, industry="Technology"),
        ]
        expenditures = [Expenditure(amount=2_500)]
        investments = [Investment(value=10, type="Stock"), Investment(value=5, type="Bond")]

        summary = build_financial_summary(contributions, expenditures, investments)

        assert summary.total_contributions == 55_000
        assert summary.total_expenditures == 2_500
        assert summary.total_investments == 15
        assert summary.contributions_by_industry[0].category == "Technology"
        assert summary.contributions_by_industry[0].total == 54_000
        assert summary.expenditures_by_industry[0].category == "Independent Expenditure"

    def test_investment_types_capped_at_five(self):
        investments = [Investment(value=i + 1, type=f"T{i}") for i in range(8)]
        assert len(investments_by_type(investments)) == 5

    def test_empty_summary(self):
        summary = build_financial_summary([], [], [])
        assert summary.total_contributions == 0
        assert summary.contributions_by_industry == []
