"""
News crawl workflow: listing page to dashboard snapshot, article page to body text
"""
import asyncio
import logging
from datetime import datetime
from typing import Optional

from src.analysis.keywords import KeywordExtractor
from src.config import AnalysisConfig, CrawlerConfig
from src.crawler.extractor import ContentExtractor, utc_today
from src.crawler.proxy import ProxyFetcher
from src.db.models import DashboardSnapshot, DashboardStats
from src.db.repository import ConfigRepository, SnapshotRepository

logger = logging.getLogger(__name__)


class NewsCrawler:
    """Crawl the news front page and individual articles through relays"""

    def __init__(
        self,
        snapshot_repo: SnapshotRepository,
        config_repo: ConfigRepository,
        crawler_config: Optional[CrawlerConfig] = None,
        analysis_config: Optional[AnalysisConfig] = None,
        keyword_extractor: Optional[KeywordExtractor] = None
    ):
        self.snapshot_repo = snapshot_repo
        self.config_repo = config_repo
        self.crawler_config = crawler_config or CrawlerConfig()
        self.analysis_config = analysis_config or AnalysisConfig()
        self.extractor = ContentExtractor(max_body_chars=self.analysis_config.max_body_chars)
        self.keyword_extractor = keyword_extractor or KeywordExtractor(top_n=self.analysis_config.top_keywords)

    async def _build_fetcher(self) -> ProxyFetcher:
        """Operator relays replace the configured defaults when present"""
        api_config = await self.config_repo.get()
        templates = None
        if api_config and api_config.custom_proxies:
            templates = api_config.custom_proxies
        return ProxyFetcher(
            templates=templates or self.crawler_config.proxies,
            user_agents=self.crawler_config.user_agents,
            timeout=self.crawler_config.timeout,
            min_length=self.crawler_config.min_content_length
        )

    async def _fetch(self, url: str) -> Optional[str]:
        fetcher = await self._build_fetcher()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fetcher.fetch_or_none, url)

    async def crawl_news(self) -> bool:
        """
        Crawl the listing page and replace the stored snapshot

        Returns:
            True on success, False when the page could not be acquired
        """
        target_url = self.crawler_config.target_url
        logger.info(f"Crawling news listing: {target_url}")

        html = await self._fetch(target_url)
        if not html:
            logger.warning(f"Could not acquire listing page {target_url}")
            return False

        today = utc_today()
        articles = self.extractor.extract_article_list(html, target_url, today=today)
        top_keywords = self.keyword_extractor.extract([a.title for a in articles])

        snapshot = DashboardSnapshot(
            stats=DashboardStats(
                date=today,
                total_articles=len(articles),
                last_updated=datetime.now().strftime('%H:%M:%S'),
                top_keywords=top_keywords
            ),
            articles=articles[:self.analysis_config.max_articles]
        )
        await self.snapshot_repo.replace(snapshot)
        logger.info(f"Crawled {len(articles)} articles, {len(top_keywords)} keywords")
        return True

    async def crawl_article_content(self, url: str) -> Optional[str]:
        """
        Fetch and extract one article's body

        Returns:
            Body text, or None when the page could not be acquired
        """
        html = await self._fetch(url)
        if not html:
            logger.warning(f"Could not acquire article page {url}")
            return None
        return self.extractor.extract_article_body(html)

    async def get_latest_snapshot(self) -> Optional[DashboardSnapshot]:
        """Stored snapshot, crawling first when none with stats exists"""
        snapshot = await self.snapshot_repo.get()
        if snapshot is None or snapshot.stats is None:
            if await self.crawl_news():
                snapshot = await self.snapshot_repo.get()
        return snapshot
