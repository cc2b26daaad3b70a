"""
Unit tests for data models
"""
import pytest

from src.db.models import (
    APIConfig,
    AnalysisReport,
    Article,
    DashboardSnapshot,
    DeepReport,
    Persona,
    Provider,
    SavedReport,
)

LEGACY_REPORT = {
    "period_summary": "旧版摘要",
    "top_keywords": [{"word": "稳增长", "weight": 70, "sentiment": "neutral"}],
    "policy_signal": "旧版信号",
    "core_topics": [{"topic": "甲"}, {"topic": "乙"}, {"topic": "丙"}, {"topic": "丁"}],
    "strategic_advice": {"title": "旧建议", "content": "旧内容", "risk_level": "High"}
}

CURRENT_REPORT = {
    "general_analysis": {"summary": "新版摘要", "keywords": [{"word": "新质生产力", "weight": 90, "sentiment": "positive"}]},
    "situation_assessment": "新版形势",
    "real_intent": "新版意图",
    "avoidance_zone": {"title": "规避", "items": ["高杠杆"]},
    "action_suggestions": {"title": "新建议", "content": "新内容", "risk_level": "Low"}
}


class TestAnalysisReport:
    """Field-by-field fallback between report generations"""

    def test_legacy_only_payload(self):
        report = AnalysisReport(raw=LEGACY_REPORT)

        assert report.summary == "旧版摘要"
        assert report.keywords == LEGACY_REPORT["top_keywords"]
        assert report.assessment == "旧版摘要"
        assert report.intent == "旧版信号"
        assert report.avoidance is None
        assert [t["topic"] for t in report.core_topics] == ["甲", "乙", "丙"]
        assert report.advice_title == "旧建议"
        assert report.advice_content == "旧内容"
        assert report.advice_risk_level == "High"

    def test_current_fields_take_precedence(self):
        report = AnalysisReport(raw={**LEGACY_REPORT, **CURRENT_REPORT})

        assert report.summary == "新版摘要"
        assert report.keywords[0]["word"] == "新质生产力"
        assert report.assessment == "新版形势"
        assert report.intent == "新版意图"
        assert report.avoidance == {"title": "规避", "items": ["高杠杆"]}
        assert report.advice_title == "新建议"
        assert report.advice_risk_level == "Low"

    def test_fallback_is_per_field(self):
        raw = {
            "general_analysis": {"summary": "新版摘要"},
            "top_keywords": [{"word": "旧词"}],
            "action_suggestions": {"title": "新建议"},
            "strategic_advice": {"title": "旧建议", "content": "旧内容"}
        }
        report = AnalysisReport(raw=raw)

        assert report.summary == "新版摘要"
        assert report.keywords == [{"word": "旧词"}]
        assert report.advice_title == "新建议"
        assert report.advice_content == "旧内容"

    def test_empty_payload(self):
        view = AnalysisReport(raw={}).to_view()

        assert view["summary"] is None
        assert view["keywords"] == []
        assert view["core_topics"] == []
        assert view["action_suggestions"] == {"title": None, "content": None, "risk_level": None}

    def test_raw_payload_untouched(self):
        raw = dict(LEGACY_REPORT)
        AnalysisReport(raw=raw).to_view()

        assert raw == LEGACY_REPORT


class TestDeepReport:
    """Test DeepReport parsing"""

    def test_single_segment_string_wrapped(self):
        report = DeepReport.from_dict({"key_segments": "唯一原句"})

        assert report.key_segments == ["唯一原句"]
        assert report.surface_meaning == ""

    def test_missing_fields_default(self):
        report = DeepReport.from_dict({})

        assert report.key_segments == []
        assert report.bias_check == ""


class TestSavedReport:
    """Test archive entries"""

    def test_round_trip(self):
        item = SavedReport(
            id="abc",
            article=Article("标题", "https://m.news.cn/a", "2024-01-01"),
            report=DeepReport(surface_meaning="表面", key_segments=["一"]),
            timestamp=1700000000000,
            persona="economist"
        )

        restored = SavedReport.from_dict(item.to_dict())

        assert restored == item
        assert restored.persona is Persona.ECONOMIST
        assert restored.key == ("https://m.news.cn/a", Persona.ECONOMIST)

    def test_unknown_persona_rejected(self):
        with pytest.raises(ValueError):
            SavedReport(id="x", article=Article("t", "u", "d"), report=DeepReport(), timestamp=0, persona="astrologer")


class TestAPIConfig:
    """Test APIConfig conversion"""

    def test_from_dict_normalizes_blanks(self):
        config = APIConfig.from_dict({"provider": "ollama", "base_url": "", "custom_proxies": []})

        assert config.provider is Provider.OLLAMA
        assert config.api_key == ""
        assert config.base_url is None
        assert config.custom_proxies is None

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValueError):
            APIConfig(provider="gemini")


class TestDashboardSnapshot:
    """Test snapshot serialization"""

    def test_empty_snapshot(self):
        snapshot = DashboardSnapshot.from_dict({"stats": None, "articles": []})

        assert snapshot.stats is None
        assert snapshot.to_dict() == {"stats": None, "articles": []}
