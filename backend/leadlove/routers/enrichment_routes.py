"""
Enrichment Router
Runs batch enrichment for places-search leads and reports batch status
"""

import logging
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from leadlove.config import settings
from leadlove.database import get_db
from leadlove.schemas import (
    BatchStatus,
    EnrichmentRequest,
    EnrichmentResponse,
    EnrichmentResults,
)
from leadlove.services.enrichment_service import (
    EnrichmentService,
    create_enrichment_service,
)
from leadlove.services.exceptions import BatchValidationError
from leadlove.services.lead_store import EnrichedLeadStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/enrichment", tags=["Enrichment"])


async def get_enrichment_service() -> AsyncIterator[EnrichmentService]:
    """Dependency: one enrichment service (and HTTP client) per request"""
    service = create_enrichment_service()
    try:
        yield service
    finally:
        await service.aclose()


@router.post("/process", response_model=EnrichmentResponse)
async def process_enrichment(
    request: EnrichmentRequest,
    service: EnrichmentService = Depends(get_enrichment_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Enrich a batch of raw leads and store the results.
    
    The response always lists both enriched leads and per-index errors;
    a 200 does not mean every lead succeeded.
    """
    if isinstance(request.leads, list) and len(request.leads) > settings.MAX_LEADS_PER_BATCH:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {settings.MAX_LEADS_PER_BATCH} leads per batch"
        )
    
    started_at = datetime.now(timezone.utc)
    
    try:
        result = await service.enrich_batch(request.batch_id, request.leads, request.options)
    except BatchValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    
    store = EnrichedLeadStore(db)
    try:
        await store.save_batch(result.batch_id, result.processed, started_at=started_at)
    except Exception as e:
        logger.error(f"Database insert error for batch {result.batch_id}: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to save enriched leads", "details": str(e)}
        )
    
    return EnrichmentResponse(
        success=True,
        batch_id=result.batch_id,
        processed_count=result.processed_count,
        error_count=result.error_count,
        results=EnrichmentResults(
            processed_leads=result.processed,
            errors=result.errors
        ),
        statistics=result.statistics
    )


@router.get("/process", response_model=BatchStatus)
async def get_enrichment_status(
    batch_id: Optional[str] = Query(None, alias="batchId"),
    db: AsyncSession = Depends(get_db)
):
    """Completion status and risk breakdown for a stored batch."""
    if not batch_id:
        raise HTTPException(status_code=400, detail="Missing batchId parameter")
    
    store = EnrichedLeadStore(db)
    status = await store.get_batch_status(batch_id)
    
    if status is None:
        raise HTTPException(status_code=404, detail="Batch not found")
    
    return status
