"""Logging setup and structured logging for trip planning."""

import logging
from typing import Any
from uuid import UUID

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the package logger."""
    root = logging.getLogger("wanderer")
    root.setLevel(level.upper())

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


class StructuredPlanLogger:
    """Structured logger for trip planning calls."""

    def log_plan(
        self,
        user_id: UUID,
        location: str,
        outcome: str,
        source: str,
        attraction_count: int,
        visit_count: int,
        total_cost: float | None,
        latency_ms: float,
    ) -> None:
        """Log one planning call with structured data."""
        log_data: dict[str, Any] = {
            "user_id": str(user_id),
            "location": location,
            "outcome": outcome,
            "source": source,
            "attraction_count": attraction_count,
            "visit_count": visit_count,
            "latency_ms": round(latency_ms, 2),
        }

        if total_cost is not None:
            log_data["total_cost"] = total_cost

        log_msg = f"Trip plan: {location} - {outcome}"

        if outcome == "success" and source != "fallback":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
