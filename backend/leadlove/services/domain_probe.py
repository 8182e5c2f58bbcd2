"""
Domain Probe - website liveness and parking detection

HEAD request to confirm the site answers, then a GET of the landing page
to look for parking-page text in the title and body.
"""

import asyncio
import logging
import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from leadlove.config import settings
from leadlove.schemas.enrichment import DomainCheckResult, DomainStatus

logger = logging.getLogger(__name__)


PARKING_INDICATORS = [
    'domain for sale',
    'parked domain',
    'this domain may be for sale',
    'under construction',
    'coming soon',
    'domain parking'
]

# Landing page bytes read before parking detection
MAX_PAGE_BYTES = 256 * 1024


def extract_domain(website: Optional[str]) -> str:
    """'https://www.acme.com/about?x=1' -> 'www.acme.com'"""
    if not website:
        return ""
    domain = re.sub(r'^https?://', '', website.strip(), flags=re.IGNORECASE)
    return domain.split('/')[0].split('?')[0].split('#')[0]


def is_parked_page(html: str) -> bool:
    """True when the page title or body contains a parking indicator."""
    soup = BeautifulSoup(html or "", 'html.parser')

    title = soup.title.get_text().lower() if soup.title else ''
    body = soup.body.get_text(" ").lower() if soup.body else ''

    return any(
        indicator in title or indicator in body
        for indicator in PARKING_INDICATORS
    )


class DomainProbe:
    """
    Classify a lead's website as active, parked or not found.

    check_domain never raises: network and parse errors degrade to not_found.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_ms: Optional[int] = None,
        user_agent: Optional[str] = None
    ):
        self.client = client
        self.timeout_ms = timeout_ms or settings.DOMAIN_CHECK_TIMEOUT
        self.user_agent = user_agent or settings.DOMAIN_CHECK_USER_AGENT

    async def check_domain(self, website: Optional[str]) -> DomainCheckResult:
        """Probe https://<domain> and classify it"""
        domain = extract_domain(website)
        if not domain:
            return DomainCheckResult(found=False, status=DomainStatus.NOT_FOUND)

        url = f"https://{domain}"

        try:
            # One deadline for HEAD and GET together
            return await asyncio.wait_for(self._run(url), self.timeout_ms / 1000.0)

        except (httpx.TimeoutException, asyncio.TimeoutError):
            logger.warning(f"Domain check timed out after {self.timeout_ms}ms: {domain}")
            return DomainCheckResult(
                found=False,
                status=DomainStatus.NOT_FOUND,
                error="timeout"
            )
        except Exception as e:
            logger.warning(f"Domain check failed for {domain}: {e}")
            return DomainCheckResult(
                found=False,
                status=DomainStatus.NOT_FOUND,
                error=str(e) or e.__class__.__name__
            )

    async def _run(self, url: str) -> DomainCheckResult:
        if self.client is not None:
            return await self._probe(self.client, url)

        async with httpx.AsyncClient(follow_redirects=True) as client:
            return await self._probe(client, url)

    async def _probe(self, client: httpx.AsyncClient, url: str) -> DomainCheckResult:
        headers = {'User-Agent': self.user_agent}
        timeout = httpx.Timeout(self.timeout_ms / 1000.0)

        head = await client.head(url, headers=headers, timeout=timeout, follow_redirects=True)
        if not head.is_success:
            logger.debug(f"HEAD {url} returned {head.status_code}")
            return DomainCheckResult(found=False, status=DomainStatus.NOT_FOUND)

        async with client.stream(
            "GET", url, headers=headers, timeout=timeout, follow_redirects=True
        ) as page:
            if not page.is_success:
                logger.debug(f"GET {url} returned {page.status_code}")
                return DomainCheckResult(found=False, status=DomainStatus.NOT_FOUND)

            html = await self._read_page(page)

        if is_parked_page(html):
            logger.info(f"Parked domain detected: {url}")
            return DomainCheckResult(found=True, status=DomainStatus.PARKED)

        return DomainCheckResult(found=True, status=DomainStatus.ACTIVE)

    @staticmethod
    async def _read_page(page: httpx.Response) -> str:
        """Read at most MAX_PAGE_BYTES of the body and decode it"""
        body = bytearray()
        async for chunk in page.aiter_bytes():
            body.extend(chunk)
            if len(body) >= MAX_PAGE_BYTES:
                break

        return bytes(body[:MAX_PAGE_BYTES]).decode(page.encoding or "utf-8", errors="replace")
