"""Keyword extraction from business name and description."""

from typing import List, Optional

# Business category terms, scanned in this order
BUSINESS_TERMS = [
    'restaurant', 'cafe', 'bar', 'hotel', 'shop', 'store', 'service', 'repair',
    'dental', 'medical', 'law', 'legal', 'accounting', 'consulting', 'marketing',
    'design', 'construction', 'real estate', 'insurance', 'fitness', 'beauty',
    'automotive', 'retail', 'wholesale', 'manufacturing', 'technology', 'software'
]

# Generic location terms, scanned after the business terms
LOCATION_TERMS = ['local', 'downtown', 'mall', 'center', 'plaza']


def extract_keywords(business_name: str, description: Optional[str] = None) -> List[str]:
    """
    Return the vocabulary terms found in "<name> <description>".
    
    Matching is a case-insensitive substring test, so "Barber" matches "bar".
    """
    text = f"{business_name or ''} {description or ''}".lower()
    
    keywords = []
    for term in BUSINESS_TERMS + LOCATION_TERMS:
        if term in text and term not in keywords:
            keywords.append(term)
    
    return keywords
