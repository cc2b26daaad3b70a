"""
AI package
"""
from src.ai.llm_client import LLMClient, extract_json, resolve_base_url
from src.ai.report_analyzer import ReportAnalyzer

__all__ = [
    'LLMClient',
    'ReportAnalyzer',
    'extract_json',
    'resolve_base_url',
]
