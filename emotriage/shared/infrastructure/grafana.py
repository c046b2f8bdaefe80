"""
Grafana OTLP Metrics Exporter
==============================

Pushes per-analysis triage metrics to Grafana Cloud via OTLP.

Metrics exported:
- triage_analysis_total_ms: End-to-end analysis latency
- triage_classifier_latency_ms: Inference call latency
- triage_storage_latency_ms: Object fetch latency
- triage_rules_ms: Decision engine latency
- triage_emotion_score: Top classifier score

Every data point carries the model, priority and signal as attributes.
"""

import base64
import time
from typing import Any, Dict, List, Optional

import httpx

from emotriage.config import settings
from emotriage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class GrafanaOTLPExporter:
    """
    Export triage metrics to Grafana Cloud via OTLP HTTP endpoint.

    Uses OpenTelemetry Protocol (OTLP) JSON format for metrics.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        api_key: Optional[str] = None,
        instance_id: Optional[str] = None
    ):
        """
        Initialize Grafana OTLP exporter.

        Args:
            host: Grafana OTLP gateway URL (e.g., https://otlp-gateway-prod-eu-west-2.grafana.net)
            api_key: Grafana API key
            instance_id: Instance ID for authentication
        """
        self._host = host or settings.grafana_host
        self._api_key = api_key or settings.grafana_api_key
        self._instance_id = instance_id or settings.grafana_instance_id
        self._enabled = bool(self._host and self._api_key and self._instance_id)

        if self._enabled:
            auth_pair = f"{self._instance_id}:{self._api_key}"
            self._auth_encoded = base64.b64encode(auth_pair.encode()).decode()
            # Don't double-append the path if host already includes it
            if "/otlp/v1/metrics" not in self._host:
                self._url = f"{self._host.rstrip('/')}/otlp/v1/metrics"
            else:
                self._url = self._host
            logger.info(
                "Grafana OTLP exporter initialized",
                extra={"host": self._host, "instance_id": self._instance_id}
            )
        else:
            logger.info(
                "Grafana OTLP exporter not configured - metrics will not be exported",
                extra={
                    "host_configured": bool(self._host),
                    "api_key_configured": bool(self._api_key),
                    "instance_id_configured": bool(self._instance_id)
                }
            )

    def is_enabled(self) -> bool:
        """Check if exporter is properly configured."""
        return self._enabled

    @property
    def url(self) -> Optional[str]:
        return self._url if self._enabled else None

    @staticmethod
    def _gauge(
        name: str,
        unit: str,
        description: str,
        value: Any,
        attributes: List[dict],
        timestamp_ns: int
    ) -> dict:
        point = {"timeUnixNano": timestamp_ns, "attributes": attributes}
        if isinstance(value, float):
            point["asDouble"] = value
        else:
            point["asInt"] = int(value)
        return {
            "name": name,
            "unit": unit,
            "description": description,
            "gauge": {"dataPoints": [point]}
        }

    def build_payload(
        self,
        metrics: List[dict],
    ) -> dict:
        """Wrap gauge metrics in an OTLP resourceMetrics envelope."""
        return {
            "resourceMetrics": [
                {
                    "resource": {
                        "attributes": [
                            {"key": "service.name", "value": {"stringValue": settings.app_name}},
                            {"key": "service.version", "value": {"stringValue": settings.app_version}},
                            {"key": "deployment.environment", "value": {"stringValue": settings.environment}},
                        ]
                    },
                    "scopeMetrics": [{"metrics": metrics}]
                }
            ]
        }

    async def export_analysis_metrics(
        self,
        model: str,
        priority: str,
        signal: str,
        score: float,
        total_ms: int,
        io_ms: int,
        classifier_ms: int,
        rules_ms: int,
        attributes: Optional[Dict[str, str]] = None
    ) -> bool:
        """
        Export metrics for one analysis.

        Returns:
            True if export succeeded, False otherwise (never raises)
        """
        if not self._enabled:
            logger.debug("Grafana exporter not enabled - skipping metrics export")
            return False

        timestamp_ns = int(time.time() * 1_000_000_000)

        metric_attributes = [
            {"key": "model", "value": {"stringValue": model}},
            {"key": "priority", "value": {"stringValue": priority}},
            {"key": "signal", "value": {"stringValue": signal}},
            {"key": "service", "value": {"stringValue": settings.app_name}},
        ]
        for key, value in (attributes or {}).items():
            metric_attributes.append({"key": key, "value": {"stringValue": str(value)}})

        payload = self.build_payload([
            self._gauge("triage_analysis_total_ms", "ms", "End-to-end analysis latency",
                        total_ms, metric_attributes, timestamp_ns),
            self._gauge("triage_classifier_latency_ms", "ms", "Emotion classifier call latency",
                        classifier_ms, metric_attributes, timestamp_ns),
            self._gauge("triage_storage_latency_ms", "ms", "Object storage fetch latency",
                        io_ms, metric_attributes, timestamp_ns),
            self._gauge("triage_rules_ms", "ms", "Triage rule evaluation latency",
                        rules_ms, metric_attributes, timestamp_ns),
            self._gauge("triage_emotion_score", "1", "Top classifier score",
                        float(score), metric_attributes, timestamp_ns),
        ])

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Basic {self._auth_encoded}",
            "X-Grafana-Org-Id": str(self._instance_id)
        }

        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.post(self._url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error(
                "Error exporting metrics to Grafana",
                extra={"error": str(e)}
            )
            return False

        if response.status_code in (200, 202):
            logger.debug(
                "Triage metrics exported to Grafana",
                extra={"priority": priority, "signal": signal, "status_code": response.status_code}
            )
            return True

        logger.warning(
            "Failed to export metrics to Grafana",
            extra={
                "status_code": response.status_code,
                "response": response.text[:500],
                "url": self._url
            }
        )
        return False


# Global exporter instance
_grafana_exporter: Optional[GrafanaOTLPExporter] = None


def get_grafana_exporter() -> GrafanaOTLPExporter:
    """Get or create global Grafana exporter instance."""
    global _grafana_exporter
    if _grafana_exporter is None:
        _grafana_exporter = GrafanaOTLPExporter()
    return _grafana_exporter


def init_grafana_exporter(
    host: str,
    api_key: str,
    instance_id: str
) -> GrafanaOTLPExporter:
    """Initialize Grafana exporter with credentials."""
    global _grafana_exporter
    _grafana_exporter = GrafanaOTLPExporter(
        host=host,
        api_key=api_key,
        instance_id=instance_id
    )
    return _grafana_exporter
