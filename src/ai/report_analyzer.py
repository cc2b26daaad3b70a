"""
Persona conditioned report generation
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

from src.ai.llm_client import LLMClient
from src.ai.prompts import (
    VALIDATION_PROMPT,
    build_deep_prompt,
    build_overview_prompt,
    build_system_prompt,
)
from src.config import AnalysisConfig, LLMConfig
from src.db.models import (
    APIConfig,
    AnalysisReport,
    Article,
    DeepReport,
    Persona,
    ReportKind,
    ValidationResult,
)
from src.db.repository import ConfigRepository
from src.errors import ConfigMissing, EmptyCompletion, ParseFailure

logger = logging.getLogger(__name__)


class ReportAnalyzer:
    """Build prompts, call the model and parse its report"""

    def __init__(
        self,
        config_repo: Optional[ConfigRepository] = None,
        analysis_config: Optional[AnalysisConfig] = None,
        llm_config: Optional[LLMConfig] = None
    ):
        """
        Initialize analyzer

        Args:
            config_repo: Source of the stored APIConfig for the analyze_* helpers
            analysis_config: Prompt limits and temperature
            llm_config: Transport timeouts
        """
        self.config_repo = config_repo
        self.analysis_config = analysis_config or AnalysisConfig()
        self.llm_config = llm_config or LLMConfig()

    def _client(self, config: APIConfig) -> LLMClient:
        return LLMClient(config, timeout=self.llm_config.timeout)

    def _build_messages(self, kind: ReportKind, persona: Persona, payload: Dict[str, Any]) -> List[Dict[str, str]]:
        if kind == ReportKind.OVERVIEW:
            user_prompt = build_overview_prompt(payload['titles'], self.analysis_config.max_titles)
        else:
            content = (payload.get('content') or '')[:self.analysis_config.max_body_chars]
            user_prompt = build_deep_prompt(payload['title'], content)
        return [
            {"role": "system", "content": build_system_prompt(kind, persona)},
            {"role": "user", "content": user_prompt},
        ]

    async def generate_report(
        self,
        kind: ReportKind,
        persona: Persona,
        payload: Dict[str, Any],
        config: APIConfig
    ) -> Union[AnalysisReport, DeepReport]:
        """
        Run one report request (no retry)

        Args:
            kind: overview (payload: {'titles': [...]}) or deep (payload: {'title', 'content'})
            persona: Analytical lens
            payload: Report input
            config: Model settings

        Returns:
            AnalysisReport for overview, DeepReport for deep

        Raises:
            ProviderError, EmptyCompletion, ParseFailure: Propagated to the caller unchanged
        """
        kind = ReportKind(kind)
        persona = Persona(persona)
        messages = self._build_messages(kind, persona, payload)
        client = self._client(config)

        logger.info(f"[ANALYZER] Generating {kind.value} report with persona {persona.value}")
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(
            None,
            lambda: client.complete_json(messages, temperature=self.analysis_config.temperature)
        )

        if not isinstance(data, dict):
            raise ParseFailure(f"Expected a JSON object, got {type(data).__name__}", raw=str(data))

        if kind == ReportKind.OVERVIEW:
            return AnalysisReport(raw=data)
        return DeepReport.from_dict(data)

    async def _require_config(self) -> APIConfig:
        config = await self.config_repo.get() if self.config_repo else None
        if config is None:
            raise ConfigMissing()
        return config

    async def analyze_overview(self, persona: Persona, articles: List[Article]) -> AnalysisReport:
        """Overview report over the given article titles"""
        config = await self._require_config()
        return await self.generate_report(
            ReportKind.OVERVIEW,
            persona,
            {'titles': [a.title for a in articles]},
            config
        )

    async def analyze_article(self, article: Article, content: str, persona: Persona) -> DeepReport:
        """Deep report for one article body"""
        config = await self._require_config()
        return await self.generate_report(
            ReportKind.DEEP,
            persona,
            {'title': article.title, 'content': content},
            config
        )

    async def validate_config(self, config: APIConfig) -> ValidationResult:
        """
        Send a tiny completion to check credentials and model reachability

        Never raises; failures are reported in the result message.
        """
        client = self._client(config)
        messages = [{"role": "user", "content": VALIDATION_PROMPT}]
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(
                None,
                lambda: client.chat_completion(
                    messages,
                    temperature=None,
                    max_tokens=self.llm_config.validation_max_tokens,
                    json_mode=False
                )
            )
        except EmptyCompletion:
            # Endpoint accepted the credentials; a 20-token reply may be blank
            pass
        except Exception as e:
            logger.warning(f"[ANALYZER] Config validation failed for {client.endpoint}: {e}")
            return ValidationResult(valid=False, models=[], message=str(e))

        logger.info(f"[ANALYZER] ✓ Config validated: {config.provider.value}/{config.model_id}")
        return ValidationResult(valid=True, models=[config.model_id], message="连接成功！")
