"""Core module for configuration, exceptions, logging and tracing.

Patterns applied:
- Pydantic Settings with SettingsConfigDict
- Custom namespaced exceptions
- structlog over stdlib loggers, opt-in handler for the host
"""
