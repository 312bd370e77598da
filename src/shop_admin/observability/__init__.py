"""
shop_admin.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for the dev backend.
"""
