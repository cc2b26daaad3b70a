"""
HTML to article list / article body extraction
"""
import re
from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urljoin
import logging

from bs4 import BeautifulSoup

from src.db.models import Article

logger = logging.getLogger(__name__)

LIST_SELECTORS = [
    '.headline a',
    '.swiper-slide .tit a',
    '.list li a',
    '.products li a',
    '#recommend li a',
]

BODY_SELECTORS = [
    '#p-detail',
    '.main-content',
    '.content',
    'article',
]

def utc_today(now: Optional[datetime] = None) -> str:
    """UTC calendar date as YYYY-MM-DD; undated articles and snapshots are stamped with it"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).date().isoformat()


# /20240105/ or /2024/0105/
DATE_PATTERNS = [
    re.compile(r'/(\d{4})(\d{2})(\d{2})/'),
    re.compile(r'/(\d{4})/(\d{2})(\d{2})/'),
]


class ContentExtractor:
    """Parse news HTML into article stubs or plain body text"""

    def __init__(self, min_title_length: int = 7, max_body_chars: int = 4000):
        self.min_title_length = min_title_length
        self.max_body_chars = max_body_chars

    def _parse(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html or "", 'html.parser')

    @staticmethod
    def extract_date(url: str, default: str) -> str:
        """Derive YYYY-MM-DD from a dated URL path"""
        for pattern in DATE_PATTERNS:
            match = pattern.search(url)
            if match:
                return f"{match.group(1)}-{match.group(2)}-{match.group(3)}"
        return default

    def extract_article_list(self, html: str, base_url: str, today: Optional[str] = None) -> List[Article]:
        """
        Collect article links from a listing page

        Args:
            html: Page source
            base_url: URL the page was fetched from, used to absolutize links
            today: Fallback date for undated URLs (default: current UTC date)

        Returns:
            Articles unique by title (first occurrence wins), newest first
        """
        if today is None:
            today = utc_today()

        soup = self._parse(html)
        articles = []
        seen_titles = set()

        for link in soup.select(', '.join(LIST_SELECTORS)):
            title = link.get_text().strip()
            href = link.get('href')
            if not title or len(title) < self.min_title_length:
                continue
            if not href or 'javascript:' in href:
                continue
            if title in seen_titles:
                continue
            seen_titles.add(title)

            full_url = href if href.startswith('http') else urljoin(base_url, href)
            articles.append(Article(
                title=title,
                url=full_url,
                date=self.extract_date(full_url, today)
            ))

        articles.sort(key=lambda a: a.date, reverse=True)
        logger.info(f"Extracted {len(articles)} unique articles from listing")
        return articles

    def extract_article_body(self, html: str) -> str:
        """
        Extract readable body text from an article page

        Returns:
            Whitespace collapsed text, truncated to max_body_chars
        """
        soup = self._parse(html)
        for tag in soup(['script', 'style']):
            tag.decompose()

        content = ""
        for selector in BODY_SELECTORS:
            element = soup.select_one(selector)
            if element is not None:
                text = element.get_text()
                if text.strip():
                    logger.debug(f"Found content using selector: {selector}")
                    content = text
                    break

        if not content:
            body = soup.body
            content = body.get_text() if body is not None else soup.get_text()

        return ' '.join(content.split())[:self.max_body_chars]
