"""OpenTelemetry metrics for evaluation runs.

Without configuration the instruments come from the global meter provider,
which is a no-op unless the host application installed one.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from opentelemetry import metrics as otel_metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, Resource

logger = logging.getLogger(__name__)

METER_NAME = "mcp_evals"


@dataclass
class MetricsConfig:
    """
    Metrics export settings.

    Attributes:
        enabled: Whether configure() installs an exporting provider
        service_name: Service name resource attribute (defaults to OTEL_SERVICE_NAME or "mcp-evals")
        otlp_endpoint: OTLP HTTP endpoint (defaults to OTEL_EXPORTER_OTLP_METRICS_ENDPOINT or the exporter default)
        export_interval_millis: Export period
    """
    enabled: bool = True
    service_name: Optional[str] = None
    otlp_endpoint: Optional[str] = None
    export_interval_millis: int = 5000


class EvalMetrics:
    """Counters and histograms for batch runs."""

    def __init__(self, meter_provider: Optional[Any] = None):
        self._meter_provider = meter_provider
        self._instruments: Optional[dict] = None

    def configure(self, config: Optional[MetricsConfig] = None) -> bool:
        """
        Install an SDK meter provider exporting over OTLP/HTTP.

        Returns:
            True if an exporting provider was installed, False otherwise
        """
        config = config or MetricsConfig()
        if not config.enabled:
            return False

        from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter

        service_name = config.service_name or os.getenv("OTEL_SERVICE_NAME", "mcp-evals")
        exporter_kwargs = {}
        endpoint = config.otlp_endpoint or os.getenv("OTEL_EXPORTER_OTLP_METRICS_ENDPOINT")
        if endpoint:
            exporter_kwargs["endpoint"] = endpoint

        reader = PeriodicExportingMetricReader(
            OTLPMetricExporter(**exporter_kwargs),
            export_interval_millis=config.export_interval_millis,
        )
        self._meter_provider = MeterProvider(
            resource=Resource.create({SERVICE_NAME: service_name}),
            metric_readers=[reader],
        )
        self._instruments = None
        logger.info(f"OpenTelemetry metrics initialized: service={service_name}, endpoint={endpoint or 'default'}")
        return True

    def shutdown(self) -> None:
        """Flush and stop an SDK provider installed by configure()."""
        if isinstance(self._meter_provider, MeterProvider):
            self._meter_provider.shutdown()

    def _get_instruments(self) -> dict:
        if self._instruments is None:
            if self._meter_provider is not None:
                meter = self._meter_provider.get_meter(METER_NAME)
            else:
                meter = otel_metrics.get_meter(METER_NAME)
            self._instruments = {
                "runs": meter.create_counter(
                    "mcp_evals.eval.runs",
                    description="Evaluations executed, by status",
                ),
                "duration": meter.create_histogram(
                    "mcp_evals.eval.duration",
                    unit="s",
                    description="Evaluation wall time",
                ),
                "tools": meter.create_counter(
                    "mcp_evals.tools.discovered",
                    description="Tools discovered on tool servers",
                ),
            }
        return self._instruments

    def record_eval(self, name: str, duration_s: float, error: Optional[str] = None) -> None:
        instruments = self._get_instruments()
        attributes = {"eval.name": name, "eval.status": "error" if error is not None else "ok"}
        instruments["runs"].add(1, attributes)
        instruments["duration"].record(duration_s, attributes)

    def record_tools(self, server_path: str, count: int) -> None:
        self._get_instruments()["tools"].add(count, {"server.path": server_path})


metrics = EvalMetrics()
