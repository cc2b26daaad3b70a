"""
Analysis API endpoints: overview, single article, batch
"""
import logging
import time
import uuid
from dataclasses import asdict
from typing import List, Optional

import requests
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from src.api.deps import Services, get_services, to_http_error
from src.db.models import Article, Persona, SavedReport
from src.errors import ConfigMissing, XinhuaInsightError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analysis", tags=["analysis"])


# Pydantic models
class ArticlePayload(BaseModel):
    """Article as sent by clients"""
    title: str
    url: str
    date: str = ""

    def to_article(self) -> Article:
        return Article(title=self.title, url=self.url, date=self.date)


class OverviewRequest(BaseModel):
    """Request model for overview analysis"""
    persona: Persona


class ArticleAnalysisRequest(BaseModel):
    """Request model for single article analysis"""
    persona: Persona
    article: ArticlePayload
    save: bool = False


class BatchRequest(BaseModel):
    """Request model for batch analysis"""
    persona: Persona
    articles: List[ArticlePayload] = Field(..., min_length=1)


@router.post("/overview")
async def analyze_overview(request: OverviewRequest, services: Services = Depends(get_services)):
    """
    Overview report over the current snapshot's titles

    Returns:
        raw model payload and the resolved canonical view
    """
    snapshot = await services.snapshot_repo.get()
    if snapshot is None or not snapshot.articles:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No crawled articles to analyze"
        )

    try:
        report = await services.analyzer.analyze_overview(request.persona, snapshot.articles)
    except (XinhuaInsightError, requests.exceptions.RequestException) as e:
        raise to_http_error(e)

    return {'persona': request.persona.value, 'raw': report.raw, 'view': report.to_view()}


@router.post("/article")
async def analyze_article(request: ArticleAnalysisRequest, services: Services = Depends(get_services)):
    """
    Fetch one article and produce a deep report, optionally saving it to the dossier
    """
    article = request.article.to_article()

    # Fail fast before spending a fetch on an unconfigured model
    if await services.config_repo.get() is None:
        raise to_http_error(ConfigMissing())

    content = await services.crawler.crawl_article_content(article.url)
    if not content:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not fetch article content: {article.url}"
        )

    try:
        report = await services.analyzer.analyze_article(article, content, request.persona)
    except (XinhuaInsightError, requests.exceptions.RequestException) as e:
        raise to_http_error(e)

    saved_id: Optional[str] = None
    if request.save:
        item = SavedReport(
            id=uuid.uuid4().hex,
            article=article,
            report=report,
            timestamp=int(time.time() * 1000),
            persona=request.persona
        )
        await services.archive_repo.save(item)
        saved_id = item.id

    return {
        'article': article.to_dict(),
        'persona': request.persona.value,
        'report': asdict(report),
        'saved_id': saved_id,
    }


@router.post("/batch", status_code=status.HTTP_202_ACCEPTED)
async def start_batch(request: BatchRequest, services: Services = Depends(get_services)):
    """
    Start a background batch run over at most five articles

    Selections over the limit, or made while another run is active, are
    rejected before anything is fetched.
    """
    articles = [a.to_article() for a in request.articles]

    def on_progress(current: int, total: int):
        logger.info(f"[BATCH] Analyzing {current}/{total}")

    try:
        await services.batch_task.start(articles, request.persona, on_progress=on_progress)
    except XinhuaInsightError as e:
        raise to_http_error(e)

    return {'accepted': len(articles), 'persona': request.persona.value}


@router.get("/batch")
async def batch_status(services: Services = Depends(get_services)):
    """
    Get batch progress
    """
    return services.batch_task.status()
