"""
Database package
"""
from src.db.database import Database
from src.db.models import (
    Article,
    WordStat,
    DashboardStats,
    DashboardSnapshot,
    APIConfig,
    AnalysisReport,
    DeepReport,
    SavedReport,
    Persona,
    Provider,
    ReportKind,
)
from src.db.repository import (
    ConfigRepository,
    SnapshotRepository,
    ArchiveRepository
)

__all__ = [
    'Database',
    'Article',
    'WordStat',
    'DashboardStats',
    'DashboardSnapshot',
    'APIConfig',
    'AnalysisReport',
    'DeepReport',
    'SavedReport',
    'Persona',
    'Provider',
    'ReportKind',
    'ConfigRepository',
    'SnapshotRepository',
    'ArchiveRepository',
]
