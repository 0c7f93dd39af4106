"""
one_to_many_example.observability

Observability package.

Responsibilities:
- Structured logging configuration.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Metrics/tracing exporters are out of scope; logging is the only sink.
