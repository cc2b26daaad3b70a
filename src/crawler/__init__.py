"""
Crawler package
"""
from src.crawler.proxy import ProxyFetcher, build_proxy_url
from src.crawler.extractor import ContentExtractor, utc_today
from src.crawler.news import NewsCrawler

__all__ = [
    'ProxyFetcher',
    'build_proxy_url',
    'ContentExtractor',
    'utc_today',
    'NewsCrawler',
]
