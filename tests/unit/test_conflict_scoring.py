"""Unit tests for conflict-of-interest heuristics."""

from datetime import date

import pytest

from ingestion.lib.analysis.conflict_scoring import (
    NO_CONFLICTS,
    NO_FINANCIAL_DATA,
    Severity,
    analyze_vote_conflicts,
    label_matches,
    scan_bills,
    score_bill,
    severity_for_amount,
    significant_investments,
    vote_correlations,
)
from ingestion.lib.models import Bill, Contribution, Investment, Vote


class TestSeverity:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (0, Severity.LOW),
            (9_999, Severity.LOW),
            (10_000, Severity.MEDIUM),
            (99_999, Severity.MEDIUM),
            (100_000, Severity.HIGH),
            (2_500_000, Severity.HIGH),
        ],
    )
    def test_thresholds(self, amount, expected):
        assert severity_for_amount(amount) == expected


class TestLabelMatches:
    def test_any_token(self):
        assert label_matches("Oil & Gas", "a bill about natural gas")

    def test_case_insensitive_label(self):
        assert label_matches("TECHNOLOGY", "regulates technology firms")

    def test_empty_label_never_matches(self):
        assert not label_matches("", "anything")
        assert not label_matches(None, "anything")


class TestScoreBill:
    def test_tech_regulation_act(self, tech_contribution):
        result = score_bill("Tech Regulation Act", "Regulates technology companies", [tech_contribution])
        assert result.has_conflict
        assert result.severity == Severity.MEDIUM
        assert result.matched_total == 50_000
        assert result.related_contributions == [tech_contribution]
        assert result.description.startswith("Found 1 related contributions and 0 related investments")

    def test_no_financial_data(self):
        result = score_bill("Any Bill", "", [], [])
        assert not result.has_conflict
        assert result.severity == Severity.LOW
        assert result.description == NO_FINANCIAL_DATA

    def test_no_overlap(self):
        result = score_bill("Farm Bill", "Agriculture subsidies", [Contribution(amount=1e6, industry="Technology")])
        assert not result.has_conflict
        assert result.description == NO_CONFLICTS

    def test_investments_count_toward_total(self, energy_investment):
        result = score_bill("Exxon accountability act", None, [], [energy_investment])
        assert result.has_conflict
        assert result.severity == Severity.HIGH
        assert result.related_investments == [energy_investment]

    def test_summary_only_match(self):
        result = score_bill(None, "Funds technology grants", [Contribution(amount=10_000, industry="Technology")])
        assert result.severity == Severity.MEDIUM

    def test_contributions_summed(self):
        contributions = [Contribution(amount=60_000, industry="Energy"), Contribution(amount=40_000, industry="Energy")]
        assert score_bill("Energy Act", "", contributions).severity == Severity.HIGH


class TestScanBills:
    def test_keeps_flagged_in_order_up_to_limit(self, tech_contribution):
        bills = [
            Bill(bill_number=f"hr{i}", title="Technology Act" if i % 2 == 0 else "Farm Act")
            for i in range(10)
        ]
        flagged = scan_bills(bills, [tech_contribution], limit=3)
        assert [f.bill.bill_number for f in flagged] == ["hr0", "hr2", "hr4"]

    def test_nothing_flagged_without_money(self, tech_bill):
        assert scan_bills([tech_bill], []) == []


class TestVoteHelpers:
    def test_vote_conflicts_from_investment(self, yea_vote, energy_investment):
        conflicts = analyze_vote_conflicts([yea_vote], [], [energy_investment])
        assert len(conflicts) == 1
        assert conflicts[0].type == "direct_interest"
        assert conflicts[0].severity == Severity.MEDIUM
        assert conflicts[0].related_votes == [yea_vote]

    def test_vote_conflicts_from_contribution_source(self):
        vote = Vote(bill_title="Acme PAC Disclosure Act")
        conflicts = analyze_vote_conflicts([vote], [Contribution(amount=1, source="Acme PAC")], [])
        assert len(conflicts) == 1

    def test_empty_asset_does_not_match(self, yea_vote):
        assert analyze_vote_conflicts([yea_vote], [], [Investment(value=1, asset="")]) == []

    def test_vote_correlations(self):
        votes = [
            Vote(bill_title="Energy Independence Act", vote="YEA"),
            Vote(bill_title="Energy Tax Act", vote="NAY"),
            Vote(bill_title="Energy Grid Act", vote="YEA"),
            Vote(bill_title="Defense Act", vote="NAY"),
        ]
        contributions = [
            Contribution(amount=500, industry="Energy"),
            Contribution(amount=700, industry="Energy"),
            Contribution(amount=5_000, industry="Defense"),
            Contribution(amount=9_000, industry="Tobacco"),
        ]

        correlations = vote_correlations(votes, contributions)

        assert [c.industry for c in correlations] == ["Defense", "Energy"]
        assert correlations[0].correlation == -1.0
        assert correlations[1].correlation == pytest.approx(1 / 3)
        assert correlations[1].contribution_total == 1_200

    def test_significant_investments_ranked(self, yea_vote):
        investments = [
            Investment(value=10, asset="Apple", date=date(2024, 1, 1)),
            Investment(value=500, asset="Exxon"),
        ]
        ranked = significant_investments(investments, [yea_vote])
        assert [r.investment.asset for r in ranked] == ["Exxon", "Apple"]
        assert ranked[0].related_votes == 1
        assert ranked[1].related_votes == 0
