"""
FastAPI main application
"""
import sys
import logging
import logging.handlers
from pathlib import Path
from typing import Optional
from contextlib import asynccontextmanager

# Add project root to path for direct execution
if __name__ == "__main__":
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import get_config
from src.db import Database
from src.api.deps import Services, set_services
from src.api.dashboard import router as dashboard_router
from src.api.analysis import router as analysis_router
from src.api.dossier import router as dossier_router
from src.api.settings import router as settings_router
from src.utils import get_log_buffer, setup_log_buffer

# Initialize logger
logger = logging.getLogger(__name__)

SERVICE_NAME = "xinhua-insight"
VERSION = "1.0.0"


def setup_logging(config):
    """Setup logging configuration"""
    log_file = Path(config.logging.file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(config.logging.format)

    # File handler with rotation
    file_handler = logging.handlers.RotatingFileHandler(
        config.logging.file,
        maxBytes=config.logging.max_bytes,
        backupCount=config.logging.backup_count,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(config.logging.level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # Log buffer for /api/logs
    setup_log_buffer(config.logging.buffer_size)

    logger.info("Logging configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    config = get_config()
    setup_logging(config)

    logger.info("Starting Xinhua Insight application...")

    db = Database(config.database.path)
    await db.connect()
    logger.info(f"Database connected: {config.database.path}")

    set_services(Services.build(db, config))

    yield

    logger.info("Shutting down Xinhua Insight application...")
    set_services(None)
    await db.close()
    logger.info("Database closed")


app = FastAPI(
    title="Xinhua Insight API",
    description="News crawling, keyword statistics and persona based LLM decoding reports",
    version=VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dashboard_router)
app.include_router(analysis_router)
app.include_router(dossier_router)
app.include_router(settings_router)


@app.get("/api/health", tags=["System"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": VERSION
    }


@app.get("/api/logs", tags=["System"])
async def get_logs(count: int = 50, level: Optional[str] = None, component: Optional[str] = None):
    """Get recent logs from buffer, optionally by minimum level or component tag"""
    buffer = get_log_buffer()
    return {
        "logs": buffer.get_logs(count, level=level, component=component),
        "components": buffer.components()
    }


if __name__ == "__main__":
    import uvicorn

    config = get_config()

    uvicorn.run(
        "src.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
        log_level="info"
    )
