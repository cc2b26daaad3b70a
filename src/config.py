"""
Configuration management module.
Loads configuration from YAML file and supports environment variable overrides.
"""
import logging
import os
import re
import yaml
from pathlib import Path
from typing import Any, Dict
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_PROXY_TEMPLATES = [
    "https://cross.250221.xyz/?url=${url}",
    "https://api.allorigins.win/raw?url=${url}&t=${timestamp}",
    "https://corsproxy.io/?${url}",
    "https://thingproxy.freeboard.io/fetch/${url}",
]


@dataclass
class ServerConfig:
    """Server configuration"""
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False


@dataclass
class CrawlerConfig:
    """Crawler configuration"""
    target_url: str = "https://m.news.cn/"
    timeout: int = 15
    min_content_length: int = 200
    user_agents: list[str] = field(default_factory=lambda: [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"
    ])
    proxies: list[str] = field(default_factory=lambda: list(DEFAULT_PROXY_TEMPLATES))


@dataclass
class AnalysisConfig:
    """Analysis configuration"""
    temperature: float = 0.7
    max_titles: int = 25
    max_body_chars: int = 4000
    max_batch_size: int = 5
    top_keywords: int = 15
    max_articles: int = 50


@dataclass
class LLMConfig:
    """LLM transport configuration (credentials live in the settings store)"""
    timeout: int = 60
    validation_max_tokens: int = 20


@dataclass
class DatabaseConfig:
    """Database configuration"""
    path: str = "./data/insight.db"


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
    file: str = "./logs/insight.log"
    max_bytes: int = 10485760
    backup_count: int = 5
    buffer_size: int = 200


class Config:
    """Application configuration"""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = config_path
        self._raw_config: Dict[str, Any] = {}

        self.server = ServerConfig()
        self.crawler = CrawlerConfig()
        self.analysis = AnalysisConfig()
        self.llm = LLMConfig()
        self.database = DatabaseConfig()
        self.logging = LoggingConfig()

        self.load()

    def load(self):
        """Load configuration from YAML file"""
        config_file = Path(self.config_path)

        if not config_file.exists():
            logger.warning(f"Config file {self.config_path} not found, using defaults")
            return

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                self._raw_config = yaml.safe_load(f) or {}

            self._raw_config = self._substitute_env_vars(self._raw_config)

            self._load_server()
            self._load_crawler()
            self._load_analysis()
            self._load_llm()
            self._load_database()
            self._load_logging()

        except Exception as e:
            logger.error(f"Error loading config: {e}")
            raise

    def _substitute_env_vars(self, config: Any) -> Any:
        """
        Recursively substitute environment variables in config.
        Supports ${VAR_NAME} format. Only upper-case names are treated as
        variables, so relay placeholders like ${url} survive untouched.
        """
        if isinstance(config, dict):
            return {k: self._substitute_env_vars(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]
        elif isinstance(config, str):
            pattern = r'\$\{([A-Z_][A-Z0-9_]*)\}'
            matches = re.findall(pattern, config)

            for var_name in matches:
                env_value = os.getenv(var_name, '')
                if not env_value:
                    logger.warning(f"Environment variable {var_name} not set")
                config = config.replace(f'${{{var_name}}}', env_value)

            return config
        else:
            return config

    def _load_section(self, name: str, target):
        """Copy keys of one YAML section onto a dataclass instance"""
        cfg = self._raw_config.get(name)
        if not isinstance(cfg, dict):
            return
        for key, value in cfg.items():
            if hasattr(target, key):
                setattr(target, key, value)
            else:
                logger.warning(f"Unknown config key: {name}.{key}")

    def _load_server(self):
        """Load server configuration"""
        self._load_section('server', self.server)

    def _load_crawler(self):
        """Load crawler configuration"""
        self._load_section('crawler', self.crawler)
        if not self.crawler.proxies:
            self.crawler.proxies = list(DEFAULT_PROXY_TEMPLATES)

    def _load_analysis(self):
        """Load analysis configuration"""
        self._load_section('analysis', self.analysis)

    def _load_llm(self):
        """Load LLM configuration"""
        self._load_section('llm', self.llm)

    def _load_database(self):
        """Load database configuration"""
        self._load_section('database', self.database)

    def _load_logging(self):
        """Load logging configuration"""
        self._load_section('logging', self.logging)


# Global config instance
_config_instance: Config = None


def get_config(config_path: str = "config.yaml") -> Config:
    """Get global config instance (singleton)"""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_path)
    return _config_instance


def reload_config(config_path: str = "config.yaml"):
    """Reload configuration"""
    global _config_instance
    _config_instance = Config(config_path)
    return _config_instance
