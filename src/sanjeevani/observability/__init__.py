"""
Sanjeevani Observability Module

Structured logging via structlog.
"""

from sanjeevani.observability.logging import configure_logging, redact_token, token_redaction_processor

__all__ = [
    "configure_logging",
    "redact_token",
    "token_redaction_processor",
]
