"""
Dossier (saved report archive) API endpoints
"""
import logging
import time
import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from pydantic import BaseModel, Field

from src.api.analysis import ArticlePayload
from src.api.deps import Services, get_services
from src.db.models import DeepReport, Persona, SavedReport
from src.report.exporter import export_filename, export_json, export_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dossier", tags=["dossier"])


# Pydantic models
class DeepReportPayload(BaseModel):
    """Deep report fields"""
    surface_meaning: str = ""
    deep_logic: str = ""
    impact_assessment: str = ""
    key_segments: List[str] = Field(default_factory=list)
    bias_check: str = ""


class SaveReportRequest(BaseModel):
    """Request model for saving a report"""
    article: ArticlePayload
    report: DeepReportPayload
    persona: Persona


@router.get("")
async def list_dossier(services: Services = Depends(get_services)):
    """
    Get all saved reports, newest pair first
    """
    reports = await services.archive_repo.get_all()
    return {'total': len(reports), 'items': [r.to_dict() for r in reports]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def save_report(request: SaveReportRequest, services: Services = Depends(get_services)):
    """
    Save a report; an existing entry for the same url and persona is replaced
    """
    item = SavedReport(
        id=uuid.uuid4().hex,
        article=request.article.to_article(),
        report=DeepReport(**request.report.model_dump()),
        timestamp=int(time.time() * 1000),
        persona=request.persona
    )
    updated = await services.archive_repo.save(item)
    return {'id': item.id, 'total': len(updated)}


@router.delete("/{report_id}")
async def delete_report(report_id: str, services: Services = Depends(get_services)):
    """
    Delete a saved report by id
    """
    updated = await services.archive_repo.delete(report_id)
    return {'total': len(updated), 'items': [r.to_dict() for r in updated]}


@router.get("/export/json")
async def export_dossier_json(services: Services = Depends(get_services)):
    """
    Download the full dossier as JSON
    """
    reports = await services.archive_repo.get_all()
    return Response(
        content=export_json(reports),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{export_filename("json")}"'}
    )


@router.get("/export/txt")
async def export_dossier_txt(services: Services = Depends(get_services)):
    """
    Download the dossier as a plain text digest
    """
    reports = await services.archive_repo.get_all()
    return Response(
        content=export_text(reports),
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename("txt")}"'}
    )
