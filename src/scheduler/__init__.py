"""
Scheduler package
"""
from src.scheduler.batch import BatchAnalysisTask, BatchResult, MAX_BATCH_SIZE

__all__ = [
    'BatchAnalysisTask',
    'BatchResult',
    'MAX_BATCH_SIZE',
]
