"""
Tests for analysis models, fallbacks and multi-claim reconciliation.
"""

import pytest

from core import claim_analyzer, report_analyzer
from model.claim import (
    ClaimAnalysis,
    ClaimInput,
    ContradictionFinding,
    RelationshipFinding,
    ReportClaimAnalysis,
)
from util.enums import RiskLevel


# === Coercion ===


class TestClaimAnalysis:
    @pytest.mark.parametrize(
        "raw,expected",
        [(8, 8), ("7", 7), (7.6, 8), ("9/10", 9), (0, 1), (-3, 1), (42, 10), ("n/a", 5), (None, 5)],
    )
    def test_scores_are_clamped(self, raw, expected):
        analysis = ClaimAnalysis.model_validate({"specificityScore": raw})

        assert analysis.specificityScore == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Low", RiskLevel.LOW),
            ("high", RiskLevel.HIGH),
            (" MEDIUM ", RiskLevel.MEDIUM),
            ("Critical", RiskLevel.MEDIUM),
            (None, RiskLevel.MEDIUM),
        ],
    )
    def test_risk_level_is_canonical(self, raw, expected):
        analysis = ClaimAnalysis.model_validate({"riskLevel": raw})

        assert analysis.riskLevel is expected

    def test_lists_accept_strings_and_nulls(self):
        analysis = ClaimAnalysis.model_validate(
            {"keyMetrics": "50% by 2030", "redFlags": None, "verificationApproach": [1, None, "CDP"]}
        )

        assert analysis.keyMetrics == ["50% by 2030"]
        assert analysis.redFlags == []
        assert analysis.verificationApproach == ["1", "CDP"]

    def test_blank_claim_type_is_unknown(self):
        assert ClaimAnalysis.model_validate({"claimType": "  "}).claimType == "Unknown"

    def test_serialized_risk_is_plain_string(self):
        dumped = ClaimAnalysis.model_validate({"riskLevel": "low"}).model_dump(mode="json")

        assert dumped["riskLevel"] == "Low"


class TestFindings:
    def test_contradiction_severity_defaults_to_medium(self):
        finding = ContradictionFinding.model_validate({"claimIds": ["a", "b"]})

        assert finding.severity is RiskLevel.MEDIUM
        assert finding.description == ""

    def test_plain_finding_has_no_severity(self):
        dumped = RelationshipFinding.model_validate(
            {"claimIds": ["a", "b"], "description": "x", "severity": "High"}
        ).model_dump()

        assert dumped == {"claimIds": ["a", "b"], "description": "x"}


# === Fallbacks ===


class TestFallbacks:
    def test_single_claim_fallback_uses_raw_text(self):
        analysis = claim_analyzer.fallback_analysis("model rambled")

        assert analysis.summary == "model rambled"
        assert analysis.verificationApproach == ["Manual review recommended"]

    def test_single_claim_fallback_without_text(self):
        assert (
            claim_analyzer.fallback_analysis("").summary
            == "Analysis could not be completed."
        )

    def test_report_fallback_mirrors_claims(self):
        claims = [ClaimInput(id="x", text="one"), ClaimInput(id="y", text="two")]

        report = report_analyzer.fallback_report(claims)

        assert [c.id for c in report.claims] == ["x", "y"]
        assert report.overallRiskLevel is RiskLevel.MEDIUM
        assert report.relationships.contradictions == []


# === Reconciliation ===


class TestReconcile:
    CLAIMS = [ClaimInput(id="a", text="one"), ClaimInput(id="b", text="two")]

    def test_ignores_non_object_entries(self):
        report = report_analyzer.reconcile(
            {"claims": ["oops", {"id": "a", "claimType": "Governance"}], "relationships": "none"},
            self.CLAIMS,
        )

        assert report.claims[0].claimType == "Governance"
        assert report.claims[1] == report_analyzer.fallback_claim("b")
        assert report.relationships.supporting == []

    def test_first_analysis_per_id_wins(self):
        report = report_analyzer.reconcile(
            {
                "claims": [
                    {"id": "a", "summary": "first"},
                    {"id": "a", "summary": "second"},
                ]
            },
            self.CLAIMS,
        )

        assert report.claims[0].summary == "first"

    def test_missing_top_level_fields_default(self):
        report = report_analyzer.reconcile({}, self.CLAIMS)

        assert report.overallRiskLevel is RiskLevel.MEDIUM
        assert report.reportSummary == ""
        assert all(isinstance(c, ReportClaimAnalysis) for c in report.claims)

    def test_finding_with_repeated_id_is_dropped(self):
        report = report_analyzer.reconcile(
            {"relationships": {"duplicates": [{"claimIds": ["a", "a"]}]}}, self.CLAIMS
        )

        assert report.relationships.duplicates == []


# === Prompts ===


class TestPrompts:
    def test_context_label_defaults(self):
        assert claim_analyzer.context_label(None, "  ") == "Unknown Company (Unknown Sector)"
        assert claim_analyzer.context_label("Acme", "Mining") == "Acme (Mining)"

    def test_format_claims(self):
        text = report_analyzer.format_claims(
            [ClaimInput(id="x", text="one"), ClaimInput(id="y", text="two")]
        )

        assert text == '[Claim 1 - ID: x]: "one"\n\n[Claim 2 - ID: y]: "two"'

    def test_single_claim_prompt_pair(self):
        prompt = claim_analyzer.build_prompt("We plant trees.", None, None)

        messages = prompt.messages()
        assert [m["role"] for m in messages] == ["system", "user"]
        assert "Verification Approach" in messages[0]["content"]
        assert '"We plant trees."' in messages[1]["content"]
