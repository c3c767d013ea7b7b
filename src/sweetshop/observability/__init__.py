"""
sweetshop.observability

Observability package.

Responsibilities:
- Structured logging configuration (with credential redaction).
- Request context propagation for consistent log enrichment.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Metrics/tracing exporters can be added here without touching service logic.
