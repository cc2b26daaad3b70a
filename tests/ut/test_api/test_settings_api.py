"""
Unit tests for settings API
"""
import pytest

from src.api.settings import mask_api_key
from src.db.models import APIConfig, Provider, ValidationResult

STORED = APIConfig(provider="deepseek", api_key="sk-1234567890abcd", model_id="deepseek-chat")


@pytest.mark.asyncio
class TestSettingsAPI:
    """Test settings endpoints"""

    async def test_get_unconfigured(self, client, services):
        response = await client.get("/api/settings")

        assert response.status_code == 200
        assert response.json() is None

    async def test_put_normalizes_blank_fields(self, client, services):
        response = await client.put("/api/settings", json={
            "provider": "ollama",
            "model_id": "qwen2",
            "base_url": "",
            "custom_proxies": ["  ", "https://relay.example/?u=${url}"]
        })

        assert response.status_code == 200
        config = services.config_repo.save.call_args[0][0]
        assert config.provider is Provider.OLLAMA
        assert config.base_url is None
        assert config.custom_proxies == ["https://relay.example/?u=${url}"]

    async def test_put_invalid_provider(self, client, services):
        response = await client.put("/api/settings", json={"provider": "gemini"})

        assert response.status_code == 422

    async def test_status_configured(self, client, services):
        services.config_repo.get.return_value = APIConfig(provider="deepseek", api_key="k", model_id="deepseek-chat")

        response = await client.get("/api/settings/status")

        assert response.json() == {"configured": True, "provider": "deepseek", "model_id": "deepseek-chat"}

    async def test_status_without_key(self, client, services):
        services.config_repo.get.return_value = APIConfig(provider="openai")

        response = await client.get("/api/settings/status")

        assert response.json()["configured"] is False

    async def test_validate(self, client, services):
        services.analyzer.validate_config.return_value = ValidationResult(valid=False, message="API 错误 401: bad key")

        response = await client.post("/api/settings/validate", json={"provider": "openai", "api_key": "bad"})

        assert response.status_code == 200
        assert response.json() == {"valid": False, "models": [], "message": "API 错误 401: bad key"}


class TestMaskApiKey:
    """Test key masking"""

    def test_long_key_keeps_tail(self):
        assert mask_api_key("sk-1234567890abcd") == "********abcd"

    def test_short_key_fully_masked(self):
        assert mask_api_key("abc") == "********"

    def test_empty_key(self):
        assert mask_api_key("") == ""


@pytest.mark.asyncio
class TestSettingsKeyExposure:
    """The stored key never leaves the service in clear text"""

    async def test_get_masks_key(self, client, services):
        services.config_repo.get.return_value = STORED

        response = await client.get("/api/settings")

        data = response.json()
        assert data["api_key"] == "********abcd"
        assert "sk-1234567890abcd" not in response.text
        assert data["model_id"] == "deepseek-chat"

    async def test_put_response_masks_key(self, client, services):
        response = await client.put("/api/settings", json={"provider": "openai", "api_key": "sk-newkey-000011112222"})

        assert response.json()["api_key"] == "********2222"
        assert services.config_repo.save.call_args[0][0].api_key == "sk-newkey-000011112222"

    async def test_put_with_masked_key_keeps_stored_key(self, client, services):
        services.config_repo.get.return_value = STORED

        await client.put("/api/settings", json={
            "provider": "deepseek",
            "api_key": "********abcd",
            "model_id": "deepseek-reasoner"
        })

        saved = services.config_repo.save.call_args[0][0]
        assert saved.api_key == "sk-1234567890abcd"
        assert saved.model_id == "deepseek-reasoner"

    async def test_validate_with_masked_key_uses_stored_key(self, client, services):
        services.config_repo.get.return_value = STORED
        services.analyzer.validate_config.return_value = ValidationResult(valid=True, models=["deepseek-chat"], message="连接成功！")

        await client.post("/api/settings/validate", json={"provider": "deepseek", "api_key": "********abcd"})

        assert services.analyzer.validate_config.call_args[0][0].api_key == "sk-1234567890abcd"
