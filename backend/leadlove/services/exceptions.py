"""Errors raised by the enrichment pipeline."""


class EnrichmentError(Exception):
    """Base class for enrichment pipeline errors."""


class BatchValidationError(EnrichmentError):
    """Malformed batch request; raised before any lead is processed."""


class LeadProcessingError(EnrichmentError):
    """Unexpected failure while enriching a single lead."""
    
    def __init__(self, index: int, message: str):
        super().__init__(message)
        self.index = index
        self.message = message
