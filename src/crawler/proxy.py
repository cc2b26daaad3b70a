"""
Relay based page fetcher
"""
import random
import time
from typing import List, Optional
from urllib.parse import quote
import logging

import requests

from src.config import DEFAULT_PROXY_TEMPLATES
from src.errors import AcquisitionExhausted

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "!~*'()"


def build_proxy_url(template: str, target_url: str, timestamp: Optional[int] = None) -> str:
    """
    Fill a relay template

    Args:
        template: Pattern containing ${url} and optionally ${timestamp}
        target_url: Absolute URL to route through the relay
        timestamp: Epoch millis; defaults to now

    Returns:
        Relay request URL
    """
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    url = template.replace('${url}', quote(target_url, safe=_URI_COMPONENT_SAFE))
    return url.replace('${timestamp}', str(timestamp))


class ProxyFetcher:
    """Fetch pages through an ordered list of third-party relays"""

    def __init__(
        self,
        templates: Optional[List[str]] = None,
        user_agents: Optional[List[str]] = None,
        timeout: int = 15,
        min_length: int = 200
    ):
        """
        Initialize fetcher

        Args:
            templates: Relay templates in priority order; empty or None uses the defaults
            user_agents: List of user agent strings for rotation
            timeout: Request timeout in seconds
            min_length: Bodies of this many characters or fewer count as relay error pages
        """
        self.templates = list(templates) if templates else list(DEFAULT_PROXY_TEMPLATES)
        self.user_agents = user_agents or ["Mozilla/5.0"]
        self.timeout = timeout
        self.min_length = min_length

    def _get_random_user_agent(self) -> str:
        """Get random user agent"""
        return random.choice(self.user_agents)

    def _make_request(self, url: str) -> requests.Response:
        """
        Make an uncached HTTP request

        Raises:
            requests.exceptions.RequestException: On request failure or non-2xx status
        """
        headers = {
            'User-Agent': self._get_random_user_agent(),
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'zh-CN,zh;q=0.9,en;q=0.8',
            'Cache-Control': 'no-cache',
            'Pragma': 'no-cache',
        }

        response = requests.get(
            url,
            headers=headers,
            timeout=self.timeout,
            allow_redirects=True
        )
        response.raise_for_status()
        return response

    def fetch(self, target_url: str) -> str:
        """
        Fetch target_url through the first relay that returns a usable body

        Each template is tried once, in order.

        Raises:
            AcquisitionExhausted: When no template produced a usable body
        """
        for idx, template in enumerate(self.templates, 1):
            proxy_url = build_proxy_url(template, target_url)
            try:
                response = self._make_request(proxy_url)
            except requests.exceptions.RequestException as e:
                logger.warning(f"[PROXY] Relay {idx}/{len(self.templates)} failed for {target_url}: {e}")
                continue

            # Decode raw bytes; relays often mislabel the charset of CJK pages
            text = response.content.decode('utf-8', errors='replace')
            if len(text) <= self.min_length:
                logger.warning(f"[PROXY] Relay {idx}/{len(self.templates)} returned only {len(text)} chars, skipping")
                continue

            logger.info(f"[PROXY] ✓ Relay {idx} returned {len(text)} chars for {target_url}")
            return text

        logger.error(f"[PROXY] All {len(self.templates)} relays failed for {target_url}")
        raise AcquisitionExhausted(target_url, len(self.templates))

    def fetch_or_none(self, target_url: str) -> Optional[str]:
        """Like fetch(), returning None when acquisition is exhausted"""
        try:
            return self.fetch(target_url)
        except AcquisitionExhausted:
            return None
