"""
Data models using dataclass
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional


class Provider(str, Enum):
    """Supported LLM providers"""
    OPENAI = "openai"
    DEEPSEEK = "deepseek"
    OLLAMA = "ollama"


class Persona(str, Enum):
    """Analytical lens applied to a report"""
    YOUTUBER = "youtuber"
    ECONOMIST = "economist"
    OBSERVER = "observer"
    PLAIN_SPOKEN = "plain_spoken"
    EXAM_PREP = "exam_prep"


class ReportKind(str, Enum):
    """Report flavour requested from the LLM"""
    OVERVIEW = "overview"
    DEEP = "deep"


@dataclass(frozen=True)
class Article:
    """Article model"""
    title: str
    url: str
    date: str  # YYYY-MM-DD format
    content: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'title': self.title, 'url': self.url, 'date': self.date}
        if self.content is not None:
            data['content'] = self.content
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        return cls(
            title=data['title'],
            url=data['url'],
            date=data.get('date', ''),
            content=data.get('content')
        )


@dataclass
class WordStat:
    """Keyword frequency"""
    word: str
    count: int


@dataclass
class DashboardStats:
    """Aggregate numbers for one crawl"""
    date: str
    total_articles: int
    last_updated: str
    top_keywords: List[WordStat] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DashboardStats":
        return cls(
            date=data['date'],
            total_articles=data['total_articles'],
            last_updated=data['last_updated'],
            top_keywords=[WordStat(**kw) for kw in data.get('top_keywords', [])]
        )


@dataclass
class DashboardSnapshot:
    """Current crawl result, replaced wholesale on every crawl"""
    stats: Optional[DashboardStats]
    articles: List[Article] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stats': asdict(self.stats) if self.stats else None,
            'articles': [a.to_dict() for a in self.articles]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DashboardSnapshot":
        stats = data.get('stats')
        return cls(
            stats=DashboardStats.from_dict(stats) if stats else None,
            articles=[Article.from_dict(a) for a in data.get('articles', [])]
        )


@dataclass
class APIConfig:
    """Operator supplied model settings"""
    provider: Provider
    api_key: str = ""
    model_id: str = ""
    base_url: Optional[str] = None
    custom_proxies: Optional[List[str]] = None

    def __post_init__(self):
        """Ensure enum value"""
        if isinstance(self.provider, str):
            self.provider = Provider(self.provider)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'provider': self.provider.value,
            'api_key': self.api_key,
            'model_id': self.model_id,
            'base_url': self.base_url,
            'custom_proxies': self.custom_proxies,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "APIConfig":
        return cls(
            provider=data['provider'],
            api_key=data.get('api_key') or "",
            model_id=data.get('model_id') or "",
            base_url=data.get('base_url') or None,
            custom_proxies=data.get('custom_proxies') or None
        )


@dataclass
class AnalysisReport:
    """
    Overview report as returned by the model.

    Two payload generations exist: the current one (general_analysis,
    situation_assessment, real_intent, avoidance_zone, action_suggestions)
    and an older one (period_summary, top_keywords, policy_signal,
    core_topics, strategic_advice). The raw payload is kept untouched and
    every reader goes through the properties below, which fall back to the
    old field names one field at a time.
    """
    raw: Dict[str, Any]

    def _get(self, key: str) -> Any:
        return self.raw.get(key)

    def _section(self, key: str) -> Dict[str, Any]:
        value = self.raw.get(key)
        return value if isinstance(value, dict) else {}

    @property
    def summary(self) -> Optional[str]:
        return self._section('general_analysis').get('summary') or self._get('period_summary')

    @property
    def keywords(self) -> List[Dict[str, Any]]:
        return self._section('general_analysis').get('keywords') or self._get('top_keywords') or []

    @property
    def assessment(self) -> Optional[str]:
        return self._get('situation_assessment') or self._get('period_summary')

    @property
    def intent(self) -> Optional[str]:
        return self._get('real_intent') or self._get('policy_signal')

    @property
    def avoidance(self) -> Optional[Dict[str, Any]]:
        return self._get('avoidance_zone') or None

    @property
    def core_topics(self) -> List[Dict[str, Any]]:
        """Legacy stand-in shown when no avoidance zone exists"""
        return (self._get('core_topics') or [])[:3]

    def _advice(self, key: str) -> Optional[str]:
        return self._section('action_suggestions').get(key) or self._section('strategic_advice').get(key)

    @property
    def advice_title(self) -> Optional[str]:
        return self._advice('title')

    @property
    def advice_content(self) -> Optional[str]:
        return self._advice('content')

    @property
    def advice_risk_level(self) -> Optional[str]:
        return self._advice('risk_level')

    def to_view(self) -> Dict[str, Any]:
        """Resolved canonical view for consumers"""
        return {
            'summary': self.summary,
            'keywords': self.keywords,
            'situation_assessment': self.assessment,
            'real_intent': self.intent,
            'avoidance_zone': self.avoidance,
            'core_topics': self.core_topics,
            'action_suggestions': {
                'title': self.advice_title,
                'content': self.advice_content,
                'risk_level': self.advice_risk_level,
            },
        }


@dataclass
class DeepReport:
    """Single article analysis"""
    surface_meaning: str = ""
    deep_logic: str = ""
    impact_assessment: str = ""
    key_segments: List[str] = field(default_factory=list)
    bias_check: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeepReport":
        segments = data.get('key_segments') or []
        if isinstance(segments, str):
            segments = [segments]
        return cls(
            surface_meaning=data.get('surface_meaning') or "",
            deep_logic=data.get('deep_logic') or "",
            impact_assessment=data.get('impact_assessment') or "",
            key_segments=[str(s) for s in segments],
            bias_check=data.get('bias_check') or ""
        )


@dataclass
class SavedReport:
    """Archive entry, unique per (article.url, persona)"""
    id: str
    article: Article
    report: DeepReport
    timestamp: int  # epoch millis
    persona: Persona

    def __post_init__(self):
        """Ensure enum value"""
        if isinstance(self.persona, str):
            self.persona = Persona(self.persona)

    @property
    def key(self) -> tuple:
        return (self.article.url, self.persona)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'article': self.article.to_dict(),
            'report': asdict(self.report),
            'timestamp': self.timestamp,
            'persona': self.persona.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedReport":
        return cls(
            id=data['id'],
            article=Article.from_dict(data['article']),
            report=DeepReport.from_dict(data['report']),
            timestamp=data['timestamp'],
            persona=data['persona']
        )


@dataclass
class ValidationResult:
    """Outcome of a configuration check"""
    valid: bool
    models: List[str] = field(default_factory=list)
    message: str = ""


@dataclass
class ConfigStatus:
    """Whether usable model settings are stored"""
    configured: bool
    provider: Optional[str] = None
    model_id: Optional[str] = None
