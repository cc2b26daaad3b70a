"""
Repositories over the three persisted slots
"""
from typing import List, Optional
import logging

from src.db.database import Database
from src.db.models import APIConfig, DashboardSnapshot, Persona, SavedReport

logger = logging.getLogger(__name__)

CONFIG_KEY = 'xinhua_insight_api_config'
SNAPSHOT_KEY = 'xinhua_insight_local_data'
DOSSIER_KEY = 'xinhua_insight_dossier'


class ConfigRepository:
    """Repository for the operator's model settings"""

    def __init__(self, db: Database):
        self.db = db

    async def get(self) -> Optional[APIConfig]:
        data = await self.db.get(CONFIG_KEY)
        return APIConfig.from_dict(data) if data else None

    async def save(self, config: APIConfig):
        async with self.db.write_lock:
            await self.db.set(CONFIG_KEY, config.to_dict())
        logger.info(f"API config saved: provider={config.provider.value}, model={config.model_id}")


class SnapshotRepository:
    """Repository for the dashboard snapshot"""

    def __init__(self, db: Database):
        self.db = db

    async def get(self) -> Optional[DashboardSnapshot]:
        data = await self.db.get(SNAPSHOT_KEY)
        return DashboardSnapshot.from_dict(data) if data else None

    async def replace(self, snapshot: DashboardSnapshot):
        """Replace the stored snapshot wholesale"""
        async with self.db.write_lock:
            await self.db.set(SNAPSHOT_KEY, snapshot.to_dict())
        logger.info(f"Snapshot replaced with {len(snapshot.articles)} articles")


class ArchiveRepository:
    """Repository for saved deep reports (the dossier)"""

    def __init__(self, db: Database):
        self.db = db

    async def get_all(self) -> List[SavedReport]:
        data = await self.db.get(DOSSIER_KEY) or []
        return [SavedReport.from_dict(item) for item in data]

    async def find(self, url: str, persona: Persona) -> Optional[SavedReport]:
        """Get the saved report for an (url, persona) pair"""
        persona = Persona(persona)
        for item in await self.get_all():
            if item.key == (url, persona):
                return item
        return None

    async def save(self, item: SavedReport) -> List[SavedReport]:
        """
        Upsert by (article.url, persona)

        An existing entry for the same pair is replaced in place; a new pair
        is prepended.

        Returns:
            Updated archive list
        """
        async with self.db.write_lock:
            current = await self.get_all()
            if any(r.key == item.key for r in current):
                updated = [item if r.key == item.key else r for r in current]
                logger.info(f"[DOSSIER] Replaced report for {item.article.url} ({item.persona.value})")
            else:
                updated = [item] + current
                logger.info(f"[DOSSIER] Added report for {item.article.url} ({item.persona.value})")
            await self.db.set(DOSSIER_KEY, [r.to_dict() for r in updated])
        return updated

    async def delete(self, report_id: str) -> List[SavedReport]:
        """Delete by id; unknown ids leave the archive unchanged"""
        async with self.db.write_lock:
            current = await self.get_all()
            updated = [r for r in current if r.id != report_id]
            await self.db.set(DOSSIER_KEY, [r.to_dict() for r in updated])
        if len(updated) == len(current):
            logger.warning(f"[DOSSIER] No report with id {report_id}")
        return updated
