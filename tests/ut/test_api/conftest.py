"""
Shared fixtures for API tests
"""
import pytest
from httpx import ASGITransport, AsyncClient
from unittest.mock import AsyncMock, Mock

from src.api.deps import get_services
from src.main import app


@pytest.fixture
def services():
    """Service container with every collaborator mocked"""
    services = Mock()
    services.config_repo.get = AsyncMock(return_value=None)
    services.config_repo.save = AsyncMock()
    services.snapshot_repo.get = AsyncMock(return_value=None)
    services.archive_repo.get_all = AsyncMock(return_value=[])
    services.archive_repo.save = AsyncMock(return_value=[])
    services.archive_repo.delete = AsyncMock(return_value=[])
    services.crawler.get_latest_snapshot = AsyncMock(return_value=None)
    services.crawler.crawl_news = AsyncMock(return_value=False)
    services.crawler.crawl_article_content = AsyncMock(return_value=None)
    services.analyzer.analyze_overview = AsyncMock()
    services.analyzer.analyze_article = AsyncMock()
    services.analyzer.validate_config = AsyncMock()
    services.batch_task.start = AsyncMock()

    app.dependency_overrides[get_services] = lambda: services
    yield services
    app.dependency_overrides.pop(get_services, None)


@pytest.fixture
async def client(services):
    """HTTP client bound to the app"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
