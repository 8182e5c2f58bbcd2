"""Completeness, risk and quality scoring for enriched leads."""

import logging
from typing import Any, Dict, List, Optional

from leadlove.schemas.enrichment import DomainStatus, RiskAssessment, RiskTag

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


class LeadScoringService:
    """Rule-based lead scoring. All methods are pure."""
    
    COMPLETENESS_FIELDS = [
        'business_name',
        'address',
        'phone',
        'email',
        'website',
        'google_rating',
        'review_count',
        'business_description',
        'category'
    ]
    
    BASELINE_RISK = 0.5
    RISKY_THRESHOLD = 0.7
    TRUSTED_THRESHOLD = 0.3
    
    # Quality weights
    COMPLETENESS_WEIGHT = 0.30
    DOMAIN_BONUS = 0.20
    RATING_WEIGHT = 0.25
    REVIEW_WEIGHT = 0.15
    RISK_PENALTY_WEIGHT = 0.10
    
    @staticmethod
    def _is_present(value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, str):
            return bool(value.strip())
        return True
    
    @staticmethod
    def calculate_completeness(lead_data: Dict[str, Any]) -> float:
        """
        Fraction of COMPLETENESS_FIELDS that are populated.
        
        A numeric 0 (e.g. zero reviews) counts as populated; blank strings do not.
        """
        fields = LeadScoringService.COMPLETENESS_FIELDS
        present = sum(
            1 for field in fields
            if LeadScoringService._is_present(lead_data.get(field))
        )
        return _clamp(present / len(fields))
    
    @staticmethod
    def derive_risk_tag(risk_score: float) -> RiskTag:
        """Bucket a risk score; both thresholds themselves map to opportunity."""
        if risk_score > LeadScoringService.RISKY_THRESHOLD:
            return RiskTag.RISKY
        if risk_score < LeadScoringService.TRUSTED_THRESHOLD:
            return RiskTag.TRUSTED
        return RiskTag.OPPORTUNITY
    
    @staticmethod
    def assess_risk(
        domain_found: bool,
        domain_status: DomainStatus,
        google_rating: Optional[float],
        review_count: Optional[int],
        has_email: bool,
        has_phone: bool,
        completeness_score: float
    ) -> RiskAssessment:
        """
        Combine domain, review, contact and completeness signals into a risk score.
        
        Adjustments are summed from a 0.5 baseline. Factor strings are emitted
        for negative signals only, in evaluation order.
        """
        factors: List[str] = []
        risk_score = LeadScoringService.BASELINE_RISK
        
        # Domain factors
        if not domain_found:
            factors.append("No website found")
            risk_score += 0.20
        elif domain_status == DomainStatus.PARKED:
            factors.append("Parked domain")
            risk_score += 0.15
        
        # Review factors
        if google_rating is None or google_rating < 3.0:
            factors.append("Low or missing Google rating")
            risk_score += 0.10
        
        if review_count is None or review_count < 5:
            factors.append("Few customer reviews")
            risk_score += 0.10
        
        # Contact information
        if not has_email and not has_phone:
            factors.append("Missing contact information")
            risk_score += 0.15
        
        if completeness_score < 0.5:
            factors.append("Incomplete business information")
            risk_score += 0.10
        
        # Positive signals
        if google_rating is not None and google_rating >= 4.0:
            risk_score -= 0.10
        
        if review_count is not None and review_count >= 20:
            risk_score -= 0.10
        
        if domain_found and domain_status == DomainStatus.ACTIVE:
            risk_score -= 0.10
        
        # Rounding drops float drift so 0.5 + 0.1 + 0.1 tags as exactly 0.7
        risk_score = round(_clamp(risk_score), 6)
        
        return RiskAssessment(
            risk_tag=LeadScoringService.derive_risk_tag(risk_score),
            risk_score=risk_score,
            risk_factors=factors
        )
    
    @staticmethod
    def calculate_lead_quality(
        completeness_score: float,
        domain_found: bool,
        google_rating: Optional[float],
        review_count: Optional[int],
        risk_score: float
    ) -> float:
        """
        quality = completeness*0.30 + domain bonus 0.20 + (rating/5)*0.25
                  + min(reviews/100, 1)*0.15 - risk*0.10, clamped to [0, 1]
        """
        domain_bonus = LeadScoringService.DOMAIN_BONUS if domain_found else 0.0
        
        rating_score = 0.0
        if google_rating is not None:
            rating_score = (google_rating / 5.0) * LeadScoringService.RATING_WEIGHT
        
        review_score = 0.0
        if review_count is not None:
            review_score = min(review_count / 100.0, 1.0) * LeadScoringService.REVIEW_WEIGHT
        
        quality = (
            completeness_score * LeadScoringService.COMPLETENESS_WEIGHT
            + domain_bonus
            + rating_score
            + review_score
            - risk_score * LeadScoringService.RISK_PENALTY_WEIGHT
        )
        
        return _clamp(quality)


# Singleton instance
scoring_service = LeadScoringService()
