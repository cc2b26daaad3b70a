"""
In-memory log buffer served by /api/logs

Records are indexed by the bracketed component tag that leads most service
messages ("[PROXY] ...", "[LLM] ...", "[BATCH] ..."), so operators can follow
one stage of a crawl or batch run without tailing the log file.
"""
import logging
import re
from collections import deque
from datetime import datetime
from typing import Deque, Dict, List, Optional

# Display levels; DEBUG collapses into info
LEVEL_MAP = {
    'DEBUG': 'info',
    'INFO': 'info',
    'WARNING': 'warning',
    'ERROR': 'error',
    'CRITICAL': 'error'
}
LEVEL_RANK = {'info': 0, 'warning': 1, 'error': 2}

_TAG = re.compile(r'^\[([A-Z]+)\]\s*')


def split_component(message: str) -> tuple:
    """'[BATCH] Analyzing 1/3' -> ('BATCH', 'Analyzing 1/3'); untagged -> (None, message)"""
    match = _TAG.match(message)
    if match is None:
        return None, message
    return match.group(1), message[match.end():]


class LogBuffer(logging.Handler):
    """Keep the most recent records, tagged by component, in memory"""

    def __init__(self, maxlen: int = 200):
        super().__init__()
        self.buffer: Deque[Dict] = deque(maxlen=maxlen)

    def emit(self, record):
        try:
            component, text = split_component(record.getMessage())
            self.buffer.append({
                'timestamp': datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S'),
                'level': LEVEL_MAP.get(record.levelname, 'info'),
                'component': component,
                'logger': record.name,
                'message': text,
            })
        except Exception:
            self.handleError(record)

    def get_logs(
        self,
        count: int = 50,
        level: Optional[str] = None,
        component: Optional[str] = None
    ) -> List[Dict]:
        """
        Most recent entries, oldest first

        Args:
            count: Maximum number of entries
            level: Minimum display level (info, warning, error)
            component: Only entries with this tag, case-insensitive
        """
        entries = list(self.buffer)
        if level is not None:
            threshold = LEVEL_RANK.get(level.lower(), 0)
            entries = [e for e in entries if LEVEL_RANK[e['level']] >= threshold]
        if component is not None:
            wanted = component.upper()
            entries = [e for e in entries if e['component'] == wanted]
        return entries[-count:] if count > 0 else []

    def components(self) -> List[str]:
        """Tags seen in the buffer, in first-seen order"""
        return list(dict.fromkeys(e['component'] for e in self.buffer if e['component']))

    def clear(self):
        self.buffer.clear()


_log_buffer: Optional[LogBuffer] = None


def get_log_buffer() -> LogBuffer:
    """Get global log buffer instance"""
    global _log_buffer
    if _log_buffer is None:
        _log_buffer = LogBuffer()
    return _log_buffer


def setup_log_buffer(maxlen: Optional[int] = None) -> LogBuffer:
    """
    Attach the log buffer to the root logger once

    Args:
        maxlen: Resize the buffer, keeping the newest entries
    """
    buffer = get_log_buffer()
    if maxlen is not None and maxlen != buffer.buffer.maxlen:
        buffer.buffer = deque(buffer.buffer, maxlen=maxlen)
    root_logger = logging.getLogger()
    if buffer not in root_logger.handlers:
        root_logger.addHandler(buffer)
    return buffer
