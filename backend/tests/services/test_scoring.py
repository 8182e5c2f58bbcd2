# tests/services/test_scoring.py
"""
Tests for LeadScoringService

Coverage:
- Completeness checklist
- Risk adjustments, factor order and tag thresholds
- Quality formula weights
- Clamping and determinism
"""

import itertools

import pytest

from leadlove.schemas.enrichment import DomainStatus, RiskTag
from leadlove.services.scoring import LeadScoringService, scoring_service

pytestmark = pytest.mark.unit


# ============================================================================
# TEST: Completeness
# ============================================================================

class TestCompleteness:

    def test_all_fields_present(self):
        lead = {
            "business_name": "Acme Plumbing",
            "address": "1 Pipe Rd",
            "phone": "555-0101",
            "email": "info@acme.example",
            "website": "https://acme.example",
            "google_rating": 4.1,
            "review_count": 12,
            "business_description": "Emergency plumbing",
            "category": "plumber"
        }
        assert LeadScoringService.calculate_completeness(lead) == 1.0

    def test_name_only(self):
        assert LeadScoringService.calculate_completeness(
            {"business_name": "Acme"}
        ) == pytest.approx(1 / 9)

    def test_blank_strings_do_not_count(self):
        lead = {
            "business_name": "Acme",
            "address": "   ",
            "phone": "",
            "email": None,
            "website": "https://acme.example"
        }
        assert LeadScoringService.calculate_completeness(lead) == pytest.approx(2 / 9)

    def test_zero_review_count_counts_as_present(self):
        lead = {"business_name": "Acme", "review_count": 0, "google_rating": 0.0}
        assert LeadScoringService.calculate_completeness(lead) == pytest.approx(3 / 9)

    def test_unrelated_fields_ignored(self):
        lead = {"business_name": "Acme", "place_id": "abc", "latitude": 1.0}
        assert LeadScoringService.calculate_completeness(lead) == pytest.approx(1 / 9)


# ============================================================================
# TEST: Risk assessment
# ============================================================================

def _assess(**overrides):
    params = dict(
        domain_found=True,
        domain_status=DomainStatus.ACTIVE,
        google_rating=4.5,
        review_count=25,
        has_email=True,
        has_phone=True,
        completeness_score=0.9
    )
    params.update(overrides)
    return LeadScoringService.assess_risk(**params)


class TestRiskAssessment:

    def test_no_website_low_rating_few_reviews(self):
        """No site, rating 2.5, 2 reviews, phone + email, completeness 0.6"""
        result = _assess(
            domain_found=False,
            domain_status=DomainStatus.NOT_FOUND,
            google_rating=2.5,
            review_count=2,
            completeness_score=0.6
        )

        assert result.risk_score == pytest.approx(0.90)
        assert result.risk_tag == RiskTag.RISKY
        assert result.risk_factors == [
            "No website found",
            "Low or missing Google rating",
            "Few customer reviews"
        ]

    def test_established_business_is_trusted(self):
        """Active domain, rating 4.8, 50 reviews, full contact, completeness 1.0"""
        result = _assess(google_rating=4.8, review_count=50, completeness_score=1.0)

        assert result.risk_score == pytest.approx(0.20)
        assert result.risk_tag == RiskTag.TRUSTED
        assert result.risk_factors == []

    def test_parked_domain(self):
        result = _assess(domain_status=DomainStatus.PARKED, google_rating=4.2, review_count=30)

        # 0.5 + 0.15 - 0.1 (rating) - 0.1 (reviews); no active-domain credit
        assert result.risk_score == pytest.approx(0.45)
        assert result.risk_tag == RiskTag.OPPORTUNITY
        assert result.risk_factors == ["Parked domain"]

    def test_parked_factor_only_when_domain_found(self):
        result = _assess(domain_found=False, domain_status=DomainStatus.PARKED)
        assert "Parked domain" not in result.risk_factors
        assert result.risk_factors[0] == "No website found"

    def test_all_negative_signals_in_order_and_clamped(self):
        result = _assess(
            domain_found=False,
            domain_status=DomainStatus.NOT_FOUND,
            google_rating=None,
            review_count=None,
            has_email=False,
            has_phone=False,
            completeness_score=0.2
        )

        # 0.5 + 0.2 + 0.1 + 0.1 + 0.15 + 0.1 = 1.15
        assert result.risk_score == 1.0
        assert result.risk_tag == RiskTag.RISKY
        assert result.risk_factors == [
            "No website found",
            "Low or missing Google rating",
            "Few customer reviews",
            "Missing contact information",
            "Incomplete business information"
        ]

    def test_email_alone_is_enough_contact(self):
        result = _assess(has_phone=False)
        assert "Missing contact information" not in result.risk_factors

    def test_rating_between_three_and_four_is_neutral(self):
        result = _assess(google_rating=3.5)
        # 0.5 - 0.1 (reviews) - 0.1 (active domain)
        assert result.risk_score == pytest.approx(0.30)
        assert result.risk_factors == []

    def test_score_of_exactly_point_seven_is_opportunity(self):
        """0.5 + 0.1 + 0.1 lands on the risky threshold"""
        result = _assess(
            domain_status=DomainStatus.EXPIRED,
            google_rating=None,
            review_count=3
        )

        assert result.risk_score == 0.7
        assert result.risk_tag == RiskTag.OPPORTUNITY

    def test_score_of_exactly_point_three_is_opportunity(self):
        """0.5 - 0.1 - 0.1 lands on the trusted threshold"""
        result = _assess(domain_status=DomainStatus.EXPIRED)

        assert result.risk_score == 0.3
        assert result.risk_tag == RiskTag.OPPORTUNITY

    @pytest.mark.parametrize("score,expected", [
        (0.0, RiskTag.TRUSTED),
        (0.29, RiskTag.TRUSTED),
        (0.3, RiskTag.OPPORTUNITY),
        (0.5, RiskTag.OPPORTUNITY),
        (0.7, RiskTag.OPPORTUNITY),
        (0.71, RiskTag.RISKY),
        (1.0, RiskTag.RISKY),
    ])
    def test_derive_risk_tag(self, score, expected):
        assert LeadScoringService.derive_risk_tag(score) == expected


# ============================================================================
# TEST: Lead quality
# ============================================================================

class TestLeadQuality:

    def test_weighted_sum(self):
        quality = LeadScoringService.calculate_lead_quality(
            completeness_score=1.0,
            domain_found=True,
            google_rating=4.8,
            review_count=50,
            risk_score=0.2
        )
        # 0.30 + 0.20 + 0.24 + 0.075 - 0.02
        assert quality == pytest.approx(0.795)

    def test_missing_rating_and_reviews_contribute_nothing(self):
        quality = LeadScoringService.calculate_lead_quality(
            completeness_score=0.5,
            domain_found=False,
            google_rating=None,
            review_count=None,
            risk_score=0.5
        )
        # 0.15 - 0.05
        assert quality == pytest.approx(0.10)

    def test_review_volume_caps_at_one_hundred(self):
        capped = LeadScoringService.calculate_lead_quality(1.0, True, 5.0, 100, 0.0)
        beyond = LeadScoringService.calculate_lead_quality(1.0, True, 5.0, 5000, 0.0)
        assert capped == beyond == pytest.approx(0.90)

    def test_clamped_at_zero(self):
        quality = LeadScoringService.calculate_lead_quality(0.0, False, None, None, 1.0)
        assert quality == 0.0

    def test_out_of_range_inputs_clamped_at_one(self):
        quality = LeadScoringService.calculate_lead_quality(3.0, True, 50.0, 10_000, 0.0)
        assert quality == 1.0


# ============================================================================
# TEST: Properties
# ============================================================================

class TestScoringProperties:

    @pytest.mark.parametrize(
        "domain_found,domain_status,rating,reviews,has_email,has_phone,completeness",
        list(itertools.product(
            [True, False],
            [DomainStatus.ACTIVE, DomainStatus.PARKED, DomainStatus.NOT_FOUND],
            [None, 0.0, 2.9, 3.0, 4.0, 5.0],
            [None, 0, 4, 5, 20, 250],
            [True, False],
            [False],
            [0.0, 0.49, 0.5, 1.0],
        ))
    )
    def test_scores_bounded_and_tag_consistent(
        self, domain_found, domain_status, rating, reviews, has_email, has_phone, completeness
    ):
        risk = LeadScoringService.assess_risk(
            domain_found, domain_status, rating, reviews, has_email, has_phone, completeness
        )
        quality = LeadScoringService.calculate_lead_quality(
            completeness, domain_found, rating, reviews, risk.risk_score
        )

        assert 0.0 <= risk.risk_score <= 1.0
        assert 0.0 <= quality <= 1.0
        assert risk.risk_tag == LeadScoringService.derive_risk_tag(risk.risk_score)

    def test_pure_functions_are_repeatable(self):
        lead = {"business_name": "Acme", "phone": "555", "google_rating": 3.2}
        assert scoring_service.calculate_completeness(lead) == scoring_service.calculate_completeness(lead)

        first = _assess(google_rating=2.0, review_count=1)
        second = _assess(google_rating=2.0, review_count=1)
        assert first == second
