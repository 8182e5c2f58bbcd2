"""
SQLAlchemy ORM models for enriched leads.

One row per successfully enriched lead, grouped by batch_id.
"""

from sqlalchemy import (
    Column, String, Boolean, Integer, Float, Text, JSON, Index,
    TIMESTAMP, CheckConstraint
)
from sqlalchemy.sql import func
from leadlove.database import Base
from uuid import uuid4


class EnrichedLeadRecord(Base):
    """Persisted output of the enrichment pipeline."""
    __tablename__ = "enriched_leads"
    
    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    batch_id = Column(String(255), nullable=False, index=True)
    
    # Basic info
    business_name = Column(String(500), nullable=False)
    address = Column(Text)
    phone = Column(String(100))
    email = Column(String(255))
    website = Column(String(500))
    latitude = Column(Float)
    longitude = Column(Float)
    place_id = Column(String(255))
    
    # Enriched data
    google_rating = Column(Float)
    review_count = Column(Integer)
    review_freshness_score = Column(Integer, default=5)
    keywords = Column(JSON, default=list)
    business_description = Column(Text)
    category = Column(String(255))
    
    # Domain analysis
    domain_found = Column(Boolean, nullable=False, default=False)
    domain_status = Column(String(20), nullable=False, default="not_found")
    social_media_presence = Column(JSON, default=dict)
    
    # Risk and quality
    risk_tag = Column(String(20), nullable=False)
    risk_score = Column(Float, nullable=False)
    risk_factors = Column(JSON, default=list)
    lead_quality_score = Column(Float, nullable=False)
    completeness_score = Column(Float, nullable=False)
    
    # Status
    enrichment_status = Column(String(20), nullable=False, default="completed")
    enrichment_started_at = Column(TIMESTAMP(timezone=True))
    enrichment_completed_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    
    __table_args__ = (
        CheckConstraint(
            "domain_status IN ('active', 'parked', 'expired', 'not_found')",
            name="chk_enriched_lead_domain_status"
        ),
        CheckConstraint(
            "risk_tag IN ('risky', 'trusted', 'opportunity')",
            name="chk_enriched_lead_risk_tag"
        ),
        CheckConstraint(
            "enrichment_status IN ('completed', 'failed')",
            name="chk_enriched_lead_status"
        ),
        Index("idx_enriched_leads_batch_risk", "batch_id", "risk_tag"),
    )
    
    def __repr__(self):
        return f"<EnrichedLeadRecord {self.business_name} ({self.risk_tag})>"
