"""OpenTelemetry adapter – APM capability over the current span."""
from mp_logfan.adapters.opentelemetry.apm import OtelApm

__all__ = ["OtelApm"]
