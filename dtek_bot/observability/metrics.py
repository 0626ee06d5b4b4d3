from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


class Metrics:
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry(auto_describe=True)
        self.upstream_attempts_total = Counter(
            "dtek_bot_upstream_attempts_total",
            "Upstream request attempts by source and outcome",
            labelnames=("source", "outcome"),
            registry=self.registry,
        )
        self.replies_total = Counter(
            "dtek_bot_replies_total",
            "Produced replies by status",
            labelnames=("status",),
            registry=self.registry,
        )
        self.reply_duration_seconds = Histogram(
            "dtek_bot_reply_duration_seconds",
            "Time spent producing a reply in seconds",
            registry=self.registry,
        )
        self.image_results_total = Counter(
            "dtek_bot_image_results_total",
            "Schedule image outcomes by result",
            labelnames=("result",),
            registry=self.registry,
        )

    def mark_upstream_attempt(self, source: str, outcome: str) -> None:
        self.upstream_attempts_total.labels(source=source, outcome=outcome).inc()

    def mark_reply(self, status: str, duration_seconds: float) -> None:
        self.replies_total.labels(status=status).inc()
        self.reply_duration_seconds.observe(duration_seconds)

    def mark_image_result(self, result: str) -> None:
        self.image_results_total.labels(result=result).inc()

    def render(self) -> tuple[bytes, str]:
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
