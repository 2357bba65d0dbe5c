"""
Utility modules for Cinemood analytics.

Provides structured logging and supporting functionality.
"""

from .logging import StructuredLogger, LogContext, get_logger, redact_secrets

__all__ = ['StructuredLogger', 'LogContext', 'get_logger', 'redact_secrets']
