"""
Log filters for secret redaction
"""
import logging
import re


REDACTED = '***REDACTED***'


class SensitiveDataFilter(logging.Filter):
    """
    Filter to redact provider API keys from log messages
    Covers query strings (?key=..., &apiKey=...) and dict messages
    """

    SENSITIVE_PATTERNS = [
        # Query string parameters
        (re.compile(r'([?&](?:key|apikey|api_key|access_key|token)=)[^&\s"\']+', re.IGNORECASE), r'\1' + REDACTED),

        # key=value in free text
        (re.compile(r'\b(api_?key|access_key|token)=[^&\s]+', re.IGNORECASE), r'\1=' + REDACTED),

        # JSON-style fields
        (re.compile(r'"(api_?key|token|secret)"\s*:\s*"[^"]*"', re.IGNORECASE), r'"\1": "' + REDACTED + '"'),

        (re.compile(r'Bearer\s+[\w\-\.]+', re.IGNORECASE), 'Bearer ' + REDACTED),
    ]

    SENSITIVE_KEYS = {'api_key', 'apikey', 'key', 'token', 'secret', 'authorization'}

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self._redact_text(record.msg)
        elif isinstance(record.msg, dict):
            record.msg = self._redact_dict(record.msg)

        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                self._redact_text(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )

        return True

    def _redact_text(self, text: str) -> str:
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def _redact_dict(self, data: dict) -> dict:
        redacted = {}
        for key, value in data.items():
            if str(key).lower() in self.SENSITIVE_KEYS:
                redacted[key] = REDACTED
            elif isinstance(value, dict):
                redacted[key] = self._redact_dict(value)
            elif isinstance(value, str):
                redacted[key] = self._redact_text(value)
            else:
                redacted[key] = value
        return redacted
