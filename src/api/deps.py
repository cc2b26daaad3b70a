"""
Service container and FastAPI dependencies
"""
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from fastapi import HTTPException, status

from src.ai.report_analyzer import ReportAnalyzer
from src.config import Config
from src.crawler.news import NewsCrawler
from src.db.database import Database
from src.db.repository import ArchiveRepository, ConfigRepository, SnapshotRepository
from src.errors import (
    AcquisitionExhausted,
    AnalysisError,
    BatchAlreadyRunning,
    BatchLimitExceeded,
    ConfigMissing,
)
from src.scheduler.batch import BatchAnalysisTask

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the routers need, wired around one database"""
    db: Database
    config_repo: ConfigRepository
    snapshot_repo: SnapshotRepository
    archive_repo: ArchiveRepository
    crawler: NewsCrawler
    analyzer: ReportAnalyzer
    batch_task: BatchAnalysisTask

    @classmethod
    def build(cls, db: Database, config: Config) -> "Services":
        config_repo = ConfigRepository(db)
        snapshot_repo = SnapshotRepository(db)
        archive_repo = ArchiveRepository(db)
        crawler = NewsCrawler(
            snapshot_repo,
            config_repo,
            crawler_config=config.crawler,
            analysis_config=config.analysis
        )
        analyzer = ReportAnalyzer(
            config_repo,
            analysis_config=config.analysis,
            llm_config=config.llm
        )
        batch_task = BatchAnalysisTask(
            crawler,
            analyzer,
            archive_repo,
            config_repo,
            max_batch_size=config.analysis.max_batch_size
        )
        return cls(
            db=db,
            config_repo=config_repo,
            snapshot_repo=snapshot_repo,
            archive_repo=archive_repo,
            crawler=crawler,
            analyzer=analyzer,
            batch_task=batch_task
        )


_services: Optional[Services] = None


def set_services(services: Optional[Services]):
    global _services
    _services = services


def get_services() -> Services:
    """Get services dependency"""
    if _services is None:
        raise RuntimeError("Services not initialized")
    return _services


def to_http_error(error: Exception) -> HTTPException:
    """Map service errors onto HTTP responses"""
    if isinstance(error, ConfigMissing):
        return HTTPException(
            status_code=status.HTTP_428_PRECONDITION_REQUIRED,
            detail=f"{error}，请先完成模型配置"
        )
    if isinstance(error, BatchLimitExceeded):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, BatchAlreadyRunning):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, (AnalysisError, AcquisitionExhausted, requests.exceptions.RequestException)):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    logger.error(f"Unexpected error: {error}", exc_info=error)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error")
