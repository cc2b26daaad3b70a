"""
Dashboard API endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.deps import Services, get_services
from src.db.models import DashboardSnapshot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("")
async def get_dashboard(services: Services = Depends(get_services)):
    """
    Get the current snapshot, crawling first if none is stored

    Returns:
        Snapshot with stats (null when nothing could be crawled) and articles
    """
    snapshot = await services.crawler.get_latest_snapshot()
    if snapshot is None:
        snapshot = DashboardSnapshot(stats=None, articles=[])
    return snapshot.to_dict()


@router.post("/crawl")
async def crawl(services: Services = Depends(get_services)):
    """
    Re-crawl the news listing and replace the snapshot
    """
    crawled = await services.crawler.crawl_news()
    if not crawled:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="All relays failed, could not fetch the news listing"
        )
    snapshot = await services.snapshot_repo.get()
    return snapshot.to_dict()
