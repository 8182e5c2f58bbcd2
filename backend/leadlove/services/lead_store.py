"""
Enriched lead storage

Writes batch output to the enriched_leads table and summarises a batch for
status polling.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leadlove.models import EnrichedLeadRecord
from leadlove.schemas.enrichment import (
    BatchStatus,
    BatchStatusStatistics,
    EnrichedLead,
    RiskTag,
)

logger = logging.getLogger(__name__)


class EnrichedLeadStore:
    """Persistence for enriched leads, keyed by batch id"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_batch(
        self,
        batch_id: str,
        leads: Sequence[EnrichedLead],
        started_at: Optional[datetime] = None
    ) -> int:
        """Insert one completed record per lead. Returns the number saved."""
        if not leads:
            return 0

        completed_at = datetime.now(timezone.utc)
        started_at = started_at or completed_at

        records = [
            self._to_record(batch_id, lead, started_at, completed_at)
            for lead in leads
        ]

        try:
            self.db.add_all(records)
            await self.db.commit()
        except Exception as e:
            logger.error(f"Failed to save {len(records)} enriched leads for batch {batch_id}: {e}")
            await self.db.rollback()
            raise

        logger.info(f"Saved {len(records)} enriched leads for batch {batch_id}")
        return len(records)

    async def get_batch_status(self, batch_id: str) -> Optional[BatchStatus]:
        """Summarise a batch, or None when nothing was stored for it"""
        result = await self.db.execute(
            select(
                EnrichedLeadRecord.enrichment_status,
                EnrichedLeadRecord.risk_tag,
                EnrichedLeadRecord.lead_quality_score
            ).where(EnrichedLeadRecord.batch_id == batch_id)
        )
        rows = result.all()

        if not rows:
            return None

        total = len(rows)
        completed = sum(1 for row in rows if row.enrichment_status == "completed")
        failed = sum(1 for row in rows if row.enrichment_status == "failed")

        statistics = BatchStatusStatistics(
            total_count=total,
            completed_count=completed,
            failed_count=failed,
            risky_count=sum(1 for row in rows if row.risk_tag == RiskTag.RISKY.value),
            trusted_count=sum(1 for row in rows if row.risk_tag == RiskTag.TRUSTED.value),
            opportunity_count=sum(1 for row in rows if row.risk_tag == RiskTag.OPPORTUNITY.value),
            avg_quality_score=sum((row.lead_quality_score or 0) for row in rows) / total
        )

        if completed == total:
            status = "completed"
        elif failed == total:
            status = "failed"
        else:
            status = "processing"

        return BatchStatus(batch_id=batch_id, status=status, statistics=statistics)

    @staticmethod
    def _to_record(
        batch_id: str,
        lead: EnrichedLead,
        started_at: datetime,
        completed_at: datetime
    ) -> EnrichedLeadRecord:
        return EnrichedLeadRecord(
            batch_id=batch_id,

            # Basic info
            business_name=lead.business_name,
            address=lead.address,
            phone=lead.phone,
            email=lead.email,
            website=lead.website,
            latitude=lead.latitude,
            longitude=lead.longitude,
            place_id=lead.place_id,

            # Enriched data
            google_rating=lead.google_rating,
            review_count=lead.review_count,
            review_freshness_score=lead.review_freshness_score,
            keywords=list(lead.keywords),
            business_description=lead.business_description,
            category=lead.category,

            # Domain analysis
            domain_found=lead.domain_found,
            domain_status=lead.domain_status.value,
            social_media_presence=dict(lead.social_media_presence),

            # Risk and quality
            risk_tag=lead.risk_tag.value,
            risk_score=lead.risk_score,
            risk_factors=list(lead.risk_factors),
            lead_quality_score=lead.lead_quality_score,
            completeness_score=lead.completeness_score,

            # Status
            enrichment_status="completed",
            enrichment_started_at=started_at,
            enrichment_completed_at=completed_at
        )
