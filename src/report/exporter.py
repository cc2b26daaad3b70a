"""
Dossier export to JSON and plain text
"""
import json
import logging
from datetime import date
from typing import List, Optional

from src.db.models import SavedReport

logger = logging.getLogger(__name__)

FILE_PREFIX = "xinhua_insight_dossier"
BLOCK_RULE = "=" * 50
SECTION_RULE = "-" * 50


def export_filename(extension: str, day: Optional[date] = None) -> str:
    """xinhua_insight_dossier_YYYY-MM-DD.<extension>"""
    day = day or date.today()
    return f"{FILE_PREFIX}_{day.isoformat()}.{extension}"


def export_json(reports: List[SavedReport]) -> str:
    """Full archive as indented JSON"""
    return json.dumps([r.to_dict() for r in reports], ensure_ascii=False, indent=2)


def export_text(reports: List[SavedReport], day: Optional[date] = None) -> str:
    """
    Plain text digest, one delimited block per saved report

    Args:
        reports: Archive entries in display order
        day: Export date printed in the header (default: today)
    """
    day = day or date.today()
    lines = [
        "XINHUA INSIGHT - DOSSIER",
        f"Export Date: {day.isoformat()}",
        "",
    ]

    for idx, item in enumerate(reports, 1):
        report = item.report
        lines.extend([
            BLOCK_RULE,
            f"REPORT #{idx}: {item.article.title}",
            f"DATE: {item.article.date}",
            f"URL: {item.article.url}",
            f"PERSONA: {item.persona.value}",
            SECTION_RULE,
            f"[Surface Meaning]: {report.surface_meaning}",
            "",
            f"[Deep Logic / Intent]: {report.deep_logic}",
            "",
            f"[Impact]: {report.impact_assessment}",
            "",
            f"[Bias Check]: {report.bias_check}",
            "",
            "[Key Signals]:",
        ])
        lines.extend(f' - "{segment}"' for segment in report.key_segments)
        lines.append("")

    logger.info(f"Exported {len(reports)} reports as text")
    return "\n".join(lines) + "\n"
