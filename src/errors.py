"""
Error types raised across the crawler, analysis and batch layers
"""


class XinhuaInsightError(Exception):
    """Base class for all service errors"""


class AcquisitionExhausted(XinhuaInsightError):
    """Every relay template failed or returned undersized content"""

    def __init__(self, url: str, attempts: int):
        self.url = url
        self.attempts = attempts
        super().__init__(f"All {attempts} relay templates failed for {url}")


class AnalysisError(XinhuaInsightError):
    """Base class for errors raised by the report pipeline"""


class ProviderError(AnalysisError):
    """LLM endpoint answered with a non-success status"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API 错误 {status_code}: {body}")


class EmptyCompletion(AnalysisError):
    """LLM returned no message content"""

    def __init__(self, message: str = "AI 返回内容为空"):
        super().__init__(message)


class ParseFailure(AnalysisError):
    """Model output could not be parsed as JSON"""

    def __init__(self, message: str, raw: str = ""):
        self.raw = raw
        super().__init__(message)


class ConfigMissing(XinhuaInsightError):
    """An operation needing model credentials ran before configuration exists"""

    def __init__(self, message: str = "配置缺失"):
        super().__init__(message)


class BatchAlreadyRunning(XinhuaInsightError):
    """A batch run was requested while another is in progress"""


class BatchLimitExceeded(XinhuaInsightError, ValueError):
    """Batch selection exceeds the allowed number of articles"""

    def __init__(self, requested: int, limit: int):
        self.requested = requested
        self.limit = limit
        super().__init__(f"Batch analysis accepts at most {limit} articles, got {requested}")
