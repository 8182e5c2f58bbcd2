"""Pydantic schemas for request/response validation."""

from leadlove.schemas.enrichment import (
    DomainStatus,
    RiskTag,
    RawLead,
    EnrichmentOptions,
    DomainCheckResult,
    PlaceDetails,
    RiskAssessment,
    EnrichedLead,
    LeadError,
    BatchStatistics,
    BatchResult,
    EnrichmentRequest,
    EnrichmentResults,
    EnrichmentResponse,
    BatchStatusStatistics,
    BatchStatus,
)

__all__ = [
    "DomainStatus",
    "RiskTag",
    "RawLead",
    "EnrichmentOptions",
    "DomainCheckResult",
    "PlaceDetails",
    "RiskAssessment",
    "EnrichedLead",
    "LeadError",
    "BatchStatistics",
    "BatchResult",
    "EnrichmentRequest",
    "EnrichmentResults",
    "EnrichmentResponse",
    "BatchStatusStatistics",
    "BatchStatus",
]
