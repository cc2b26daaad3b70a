"""
Analysis package
"""
from src.analysis.keywords import KeywordExtractor, extract_keywords

__all__ = [
    'KeywordExtractor',
    'extract_keywords',
]
