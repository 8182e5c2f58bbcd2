"""
Pydantic schemas for the enrichment pipeline.

RawLead and EnrichedLead use the snake_case field names of the places
scraper payload; request options use camelCase wire names.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DomainStatus(str, Enum):
    ACTIVE = "active"
    PARKED = "parked"
    EXPIRED = "expired"
    NOT_FOUND = "not_found"


class RiskTag(str, Enum):
    RISKY = "risky"
    TRUSTED = "trusted"
    OPPORTUNITY = "opportunity"


class RawLead(BaseModel):
    """Business record as received from the places search"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    business_name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    place_id: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator('business_name')
    @classmethod
    def validate_business_name(cls, v):
        if not v or not v.strip():
            raise ValueError('business_name cannot be empty')
        return v


class EnrichmentOptions(BaseModel):
    """Per-batch switches for the enrichment pipeline"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    skip_domain_check: bool = Field(False, alias="skipDomainCheck")
    skip_directory_lookup: bool = Field(False, alias="skipDirectoryLookup")
    max_concurrent: Optional[int] = Field(None, alias="maxConcurrent", ge=1)

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> "EnrichmentOptions":
        """Build options from a request body, honouring the legacy skipGoogleReviews flag."""
        payload = dict(payload or {})
        if "skipGoogleReviews" in payload and "skipDirectoryLookup" not in payload:
            payload["skipDirectoryLookup"] = payload.pop("skipGoogleReviews")
        return cls.model_validate(payload)


class DomainCheckResult(BaseModel):
    """Outcome of a domain liveness / parking probe"""
    model_config = ConfigDict(frozen=True)

    found: bool = False
    status: DomainStatus = DomainStatus.NOT_FOUND
    error: Optional[str] = None


class PlaceDetails(BaseModel):
    """Directory details for a place; every field absent when the lookup fails"""
    model_config = ConfigDict(frozen=True)

    rating: Optional[float] = Field(None, ge=0, le=5)
    review_count: Optional[int] = Field(None, ge=0)
    business_description: Optional[str] = None
    category: Optional[str] = None
    review_freshness_score: Optional[int] = Field(None, ge=1, le=10)


class RiskAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    risk_tag: RiskTag
    risk_score: float = Field(..., ge=0, le=1)
    risk_factors: List[str] = Field(default_factory=list)


class EnrichedLead(RawLead):
    """RawLead plus derived signals and scores"""

    google_rating: Optional[float] = Field(None, ge=0, le=5)
    review_count: Optional[int] = Field(None, ge=0)
    review_freshness_score: int = Field(5, ge=1, le=10)
    keywords: List[str] = Field(default_factory=list)
    business_description: Optional[str] = None
    category: Optional[str] = None

    domain_found: bool = False
    domain_status: DomainStatus = DomainStatus.NOT_FOUND
    social_media_presence: Dict[str, str] = Field(default_factory=dict)

    risk_tag: RiskTag
    risk_score: float = Field(..., ge=0, le=1)
    risk_factors: List[str] = Field(default_factory=list)
    completeness_score: float = Field(..., ge=0, le=1)
    lead_quality_score: float = Field(..., ge=0, le=1)


class LeadError(BaseModel):
    """A lead that could not be enriched, by position in the submitted batch"""
    index: int
    error: str


class BatchStatistics(BaseModel):
    risky_count: int = 0
    trusted_count: int = 0
    opportunity_count: int = 0
    avg_quality_score: float = 0.0
    domain_found_count: int = 0


class BatchResult(BaseModel):
    batch_id: str
    processed: List[EnrichedLead] = Field(default_factory=list)
    errors: List[LeadError] = Field(default_factory=list)
    statistics: BatchStatistics = Field(default_factory=BatchStatistics)

    @property
    def processed_count(self) -> int:
        return len(self.processed)

    @property
    def error_count(self) -> int:
        return len(self.errors)


class EnrichmentRequest(BaseModel):
    """Body of POST /api/enrichment/process"""
    # Left loosely typed so the service can reject malformed batches with a 400
    batch_id: Optional[str] = Field(None, alias="batchId")
    leads: Any = None
    options: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "batchId": "batch-2024-06-01",
                "leads": [
                    {
                        "business_name": "Downtown Dental Care",
                        "address": "12 Main St, Springfield",
                        "phone": "+1 555 0100",
                        "website": "https://downtowndental.example",
                        "place_id": "ChIJN1t_tDeuEmsRUsoyG83frY4"
                    }
                ],
                "options": {"skipDomainCheck": False, "maxConcurrent": 5}
            }
        }
    )


class EnrichmentResults(BaseModel):
    processed_leads: List[EnrichedLead]
    errors: List[LeadError]


class EnrichmentResponse(BaseModel):
    success: bool = True
    batch_id: str
    processed_count: int
    error_count: int
    results: EnrichmentResults
    statistics: BatchStatistics


class BatchStatusStatistics(BaseModel):
    total_count: int = 0
    completed_count: int = 0
    failed_count: int = 0
    risky_count: int = 0
    trusted_count: int = 0
    opportunity_count: int = 0
    avg_quality_score: float = 0.0


class BatchStatus(BaseModel):
    batch_id: str
    status: str  # completed | failed | processing
    statistics: BatchStatusStatistics
