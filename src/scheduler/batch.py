"""
Sequential batch analysis of selected articles
"""
import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional

from src.ai.report_analyzer import ReportAnalyzer
from src.crawler.news import NewsCrawler
from src.db.models import Article, Persona, SavedReport
from src.db.repository import ArchiveRepository, ConfigRepository
from src.errors import BatchAlreadyRunning, BatchLimitExceeded, ConfigMissing

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

MAX_BATCH_SIZE = 5


@dataclass
class BatchResult:
    """Outcome of one batch run"""
    total: int
    saved: int = 0
    skipped: int = 0
    cancelled: bool = False


class BatchAnalysisTask:
    """Deep-analyze articles one at a time and archive each report"""

    def __init__(
        self,
        crawler: NewsCrawler,
        analyzer: ReportAnalyzer,
        archive_repo: ArchiveRepository,
        config_repo: ConfigRepository,
        max_batch_size: int = MAX_BATCH_SIZE
    ):
        self.crawler = crawler
        self.analyzer = analyzer
        self.archive_repo = archive_repo
        self.config_repo = config_repo
        self.max_batch_size = max_batch_size

        self._running = False
        self._current = 0
        self._total = 0
        self._last_result: Optional[BatchResult] = None
        self._background: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    def status(self) -> dict:
        """Current state: idle, running(current, total) or completed"""
        if self._running:
            state = 'running'
        elif self._last_result is not None and not self._last_result.cancelled:
            state = 'completed'
        else:
            state = 'idle'
        return {
            'state': state,
            'current': self._current,
            'total': self._total,
            'saved': self._last_result.saved if self._last_result else 0,
        }

    async def check(self, articles: List[Article]):
        """
        Reject a selection before any network call

        Raises:
            BatchLimitExceeded: More articles than max_batch_size
            ConfigMissing: No model settings stored
            BatchAlreadyRunning: Another run is in progress
        """
        if len(articles) > self.max_batch_size:
            raise BatchLimitExceeded(len(articles), self.max_batch_size)
        if await self.config_repo.get() is None:
            raise ConfigMissing()
        if self._running:
            raise BatchAlreadyRunning("Batch analysis already running")

    async def _reserve(self, articles: List[Article]):
        """check() then claim the run slot; no await after the running test"""
        await self.check(articles)
        self._running = True
        self._current = 0
        self._total = len(articles)
        self._last_result = None

    async def run(
        self,
        articles: List[Article],
        persona: Persona,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> BatchResult:
        """
        Analyze articles strictly in order

        Args:
            articles: At most max_batch_size articles
            persona: Lens for every report in the run
            on_progress: Called with (index + 1, total) before each item starts
            cancel_event: When set, the run stops before the next item

        Returns:
            BatchResult with saved/skipped counts
        """
        persona = Persona(persona)
        await self._reserve(articles)
        return await self._execute(articles, persona, on_progress, cancel_event)

    async def start(
        self,
        articles: List[Article],
        persona: Persona,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> asyncio.Task:
        """
        Claim the run slot, then continue the run in a background task

        Rejections (limit, config, already running) are raised here, to the
        caller, never inside the background task.
        """
        persona = Persona(persona)
        await self._reserve(articles)
        self._background = asyncio.create_task(
            self._execute(articles, persona, on_progress, cancel_event)
        )
        self._background.add_done_callback(self._on_background_done)
        return self._background

    def _on_background_done(self, task: asyncio.Task):
        if task.cancelled():
            logger.warning("[BATCH] Background batch run cancelled")
            # Cancelled before its first step, so _execute never released the slot
            if self._background is task and self._last_result is None:
                self._running = False
        elif task.exception() is not None:
            logger.error(f"[BATCH] Batch run failed: {task.exception()}")
        if self._background is task:
            self._background = None

    async def _execute(
        self,
        articles: List[Article],
        persona: Persona,
        on_progress: Optional[ProgressCallback],
        cancel_event: Optional[asyncio.Event]
    ) -> BatchResult:
        total = len(articles)
        result = BatchResult(total=total)
        logger.info(f"[BATCH] Starting batch of {total} articles with persona {persona.value}")

        try:
            for idx, article in enumerate(articles):
                if cancel_event is not None and cancel_event.is_set():
                    logger.info(f"[BATCH] Cancelled before item {idx + 1}/{total}")
                    result.cancelled = True
                    break

                self._current = idx + 1
                if on_progress:
                    on_progress(idx + 1, total)

                try:
                    if await self._process_article(article, persona):
                        result.saved += 1
                    else:
                        result.skipped += 1
                except Exception as e:
                    logger.error(f"[BATCH] Error in batch item {article.title}: {e}")
                    result.skipped += 1
                    continue

            logger.info(f"[BATCH] Batch finished: {result.saved} saved, {result.skipped} skipped")
            return result

        finally:
            self._last_result = result
            self._running = False

    async def _process_article(self, article: Article, persona: Persona) -> bool:
        """Fetch, analyze and archive one article; False when the body was unavailable"""
        content = await self.crawler.crawl_article_content(article.url)
        if not content:
            logger.warning(f"[BATCH] No content for {article.url}, skipping")
            return False

        report = await self.analyzer.analyze_article(article, content, persona)
        await self.archive_repo.save(SavedReport(
            id=uuid.uuid4().hex,
            article=article,
            report=report,
            timestamp=int(time.time() * 1000),
            persona=persona
        ))
        return True
