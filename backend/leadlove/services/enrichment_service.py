# backend/leadlove/services/enrichment_service.py
"""
Lead Enrichment Service - Batch Orchestration

Per lead:
1. Domain probe + place details lookup (concurrently)
2. Keywords → completeness → risk → quality (pure, in order)
3. Assemble EnrichedLead

Batches run in fixed groups of max_concurrent leads; a group fully settles
before the next one starts. A failing lead is recorded in BatchResult.errors
and never aborts the batch.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx
from pydantic import ValidationError

from leadlove.config import settings
from leadlove.schemas.enrichment import (
    BatchResult,
    BatchStatistics,
    DomainCheckResult,
    DomainStatus,
    EnrichedLead,
    EnrichmentOptions,
    LeadError,
    PlaceDetails,
    RawLead,
    RiskTag,
)
from leadlove.services.domain_probe import DomainProbe
from leadlove.services.exceptions import BatchValidationError, LeadProcessingError
from leadlove.services.keywords import extract_keywords
from leadlove.services.place_details import (
    DEFAULT_FRESHNESS_SCORE,
    GooglePlacesDirectory,
    PlaceDetailsFetcher,
)
from leadlove.services.scoring import LeadScoringService, scoring_service

logger = logging.getLogger(__name__)


class LeadOutcome:
    """Settled result of one lead: either an enriched lead or an error"""

    def __init__(
        self,
        index: int,
        lead: Optional[EnrichedLead] = None,
        error: Optional[LeadProcessingError] = None
    ):
        self.index = index
        self.lead = lead
        self.error = error

    @property
    def success(self) -> bool:
        return self.lead is not None


class EnrichmentService:
    """
    Enrichment orchestrator

    Owns no per-lead state: every call to enrich_lead builds a fresh
    EnrichedLead, so leads in a group can run concurrently.
    """

    def __init__(
        self,
        domain_probe: Optional[DomainProbe] = None,
        place_fetcher: Optional[PlaceDetailsFetcher] = None,
        scoring: Optional[LeadScoringService] = None,
        max_concurrent: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.domain_probe = domain_probe or DomainProbe(client=http_client)
        self.place_fetcher = place_fetcher or PlaceDetailsFetcher(
            GooglePlacesDirectory(client=http_client)
        )
        self.scoring = scoring or scoring_service
        self.max_concurrent = max_concurrent or settings.ENRICHMENT_MAX_CONCURRENT
        self._http_client = http_client

    async def __aenter__(self) -> "EnrichmentService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the shared HTTP client, if this service was given one"""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    async def enrich_batch(
        self,
        batch_id: Optional[str],
        leads: Any,
        options: Union[EnrichmentOptions, Dict[str, Any], None] = None
    ) -> BatchResult:
        """
        Enrich a batch of raw leads.

        Args:
            batch_id: Caller's batch identifier (required)
            leads: List of RawLead or raw lead dicts
            options: EnrichmentOptions or a camelCase options dict

        Returns:
            BatchResult with processed leads and per-index errors, in input order

        Raises:
            BatchValidationError: batch_id missing or leads not a list
        """
        self._validate_batch(batch_id, leads)
        options = self._resolve_options(options)

        group_size = options.max_concurrent or self.max_concurrent
        start_time = time.monotonic()

        logger.info(
            f"Starting enrichment batch {batch_id}: {len(leads)} leads, "
            f"max_concurrent={group_size}"
        )

        outcomes: List[LeadOutcome] = []

        for start in range(0, len(leads), group_size):
            group = leads[start:start + group_size]
            settled = await asyncio.gather(
                *(
                    self._enrich_at(batch_id, start + offset, lead, options)
                    for offset, lead in enumerate(group)
                ),
                return_exceptions=True
            )

            for offset, outcome in enumerate(settled):
                if isinstance(outcome, LeadOutcome):
                    outcomes.append(outcome)
                elif isinstance(outcome, Exception):
                    index = start + offset
                    outcomes.append(LeadOutcome(
                        index=index,
                        error=LeadProcessingError(index, str(outcome) or "Processing failed")
                    ))
                else:
                    raise outcome

        result = self._merge_outcomes(batch_id, outcomes)

        elapsed = time.monotonic() - start_time
        logger.info(
            f"Batch {batch_id} complete: {result.processed_count} enriched, "
            f"{result.error_count} failed, time={elapsed:.2f}s"
        )

        return result

    async def _enrich_at(
        self,
        batch_id: str,
        index: int,
        lead: Union[RawLead, Dict[str, Any]],
        options: EnrichmentOptions
    ) -> LeadOutcome:
        """Per-lead failure boundary"""
        try:
            raw_lead = lead if isinstance(lead, RawLead) else RawLead.model_validate(lead)
            enriched = await self.enrich_lead(raw_lead, options)
            return LeadOutcome(index=index, lead=enriched)
        except Exception as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"Batch {batch_id}: lead {index} enrichment failed: {message}")
            return LeadOutcome(index=index, error=LeadProcessingError(index, message))

    def _merge_outcomes(self, batch_id: str, outcomes: List[LeadOutcome]) -> BatchResult:
        processed: List[EnrichedLead] = []
        errors: List[LeadError] = []

        for outcome in sorted(outcomes, key=lambda o: o.index):
            if outcome.success:
                processed.append(outcome.lead)
            else:
                errors.append(LeadError(index=outcome.index, error=outcome.error.message))

        return BatchResult(
            batch_id=batch_id,
            processed=processed,
            errors=errors,
            statistics=self.compute_statistics(processed)
        )

    @staticmethod
    def compute_statistics(processed: Sequence[EnrichedLead]) -> BatchStatistics:
        """Aggregate counts over successfully enriched leads"""
        if not processed:
            return BatchStatistics()

        return BatchStatistics(
            risky_count=sum(1 for lead in processed if lead.risk_tag == RiskTag.RISKY),
            trusted_count=sum(1 for lead in processed if lead.risk_tag == RiskTag.TRUSTED),
            opportunity_count=sum(1 for lead in processed if lead.risk_tag == RiskTag.OPPORTUNITY),
            avg_quality_score=sum(lead.lead_quality_score for lead in processed) / len(processed),
            domain_found_count=sum(1 for lead in processed if lead.domain_found)
        )

    @staticmethod
    def _validate_batch(batch_id: Optional[str], leads: Any) -> None:
        if not batch_id or not isinstance(batch_id, str) or not batch_id.strip():
            raise BatchValidationError("Missing required fields: batchId and leads array")
        if not isinstance(leads, (list, tuple)):
            raise BatchValidationError("Missing required fields: batchId and leads array")

    @staticmethod
    def _resolve_options(
        options: Union[EnrichmentOptions, Dict[str, Any], None]
    ) -> EnrichmentOptions:
        if options is None:
            return EnrichmentOptions()
        if isinstance(options, EnrichmentOptions):
            return options
        try:
            return EnrichmentOptions.from_payload(options)
        except ValidationError as e:
            raise BatchValidationError(f"Invalid enrichment options: {e}") from e

    # ------------------------------------------------------------------
    # Single lead
    # ------------------------------------------------------------------

    async def enrich_lead(
        self,
        raw_lead: RawLead,
        options: Optional[EnrichmentOptions] = None
    ) -> EnrichedLead:
        """Run the full enrichment pipeline for one lead"""
        options = options or EnrichmentOptions()

        # Independent network steps
        domain_check, place = await asyncio.gather(
            self._check_domain(raw_lead, options),
            self._fetch_place(raw_lead, options)
        )

        lead_data = raw_lead.model_dump()
        lead_data.update(
            google_rating=place.rating,
            review_count=place.review_count,
            business_description=place.business_description,
            category=place.category
        )

        keywords = extract_keywords(raw_lead.business_name, place.business_description)
        completeness = self.scoring.calculate_completeness(lead_data)

        risk = self.scoring.assess_risk(
            domain_found=domain_check.found,
            domain_status=domain_check.status,
            google_rating=place.rating,
            review_count=place.review_count,
            has_email=bool(raw_lead.email and raw_lead.email.strip()),
            has_phone=bool(raw_lead.phone and raw_lead.phone.strip()),
            completeness_score=completeness
        )

        quality = self.scoring.calculate_lead_quality(
            completeness_score=completeness,
            domain_found=domain_check.found,
            google_rating=place.rating,
            review_count=place.review_count,
            risk_score=risk.risk_score
        )

        return EnrichedLead(
            **lead_data,
            review_freshness_score=place.review_freshness_score or DEFAULT_FRESHNESS_SCORE,
            keywords=keywords,
            domain_found=domain_check.found,
            domain_status=domain_check.status,
            social_media_presence={},
            risk_tag=risk.risk_tag,
            risk_score=risk.risk_score,
            risk_factors=list(risk.risk_factors),
            completeness_score=completeness,
            lead_quality_score=quality
        )

    async def _check_domain(self, raw_lead: RawLead, options: EnrichmentOptions) -> DomainCheckResult:
        has_website = bool(raw_lead.website and raw_lead.website.strip())

        if options.skip_domain_check:
            return DomainCheckResult(
                found=has_website,
                status=DomainStatus.ACTIVE if has_website else DomainStatus.NOT_FOUND
            )

        if not has_website:
            return DomainCheckResult(found=False, status=DomainStatus.NOT_FOUND)

        return await self.domain_probe.check_domain(raw_lead.website)

    async def _fetch_place(self, raw_lead: RawLead, options: EnrichmentOptions) -> PlaceDetails:
        if options.skip_directory_lookup or not raw_lead.place_id:
            return PlaceDetails()

        return await self.place_fetcher.fetch(raw_lead.place_id)


def create_enrichment_service(
    google_places_key: str = None,
    max_concurrent: int = None,
    timeout_ms: int = None
) -> EnrichmentService:
    """Create enrichment service with one HTTP client shared by both probes"""
    http_client = httpx.AsyncClient(follow_redirects=True)

    return EnrichmentService(
        domain_probe=DomainProbe(client=http_client, timeout_ms=timeout_ms),
        place_fetcher=PlaceDetailsFetcher(
            GooglePlacesDirectory(api_key=google_places_key, client=http_client)
        ),
        max_concurrent=max_concurrent,
        http_client=http_client
    )
