"""Prometheus textfile export of test outcomes and page-object activity.

Each write builds a fresh registry so repeated runs in one process never
accumulate stale series.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from prometheus_client import CollectorRegistry, Gauge, generate_latest


@dataclass(frozen=True)
class SessionMetrics:
    """Aggregate counters exported when the pytest session finishes."""

    total: int
    passed: int
    failed: int
    skipped: int
    duration_seconds: float
    browser_sessions: int = 0
    actions: Mapping[str, int] = field(default_factory=dict)


def build_registry(summary: SessionMetrics) -> CollectorRegistry:
    registry = CollectorRegistry()
    outcomes = Gauge(
        "qa_tests",
        "Tests by outcome",
        ["outcome"],
        registry=registry,
    )
    for outcome in ("total", "passed", "failed", "skipped"):
        outcomes.labels(outcome=outcome).set(getattr(summary, outcome))

    Gauge(
        "qa_test_session_duration_seconds",
        "Total pytest session duration in seconds",
        registry=registry,
    ).set(summary.duration_seconds)
    Gauge(
        "qa_browser_sessions",
        "Browser contexts opened for page objects",
        registry=registry,
    ).set(summary.browser_sessions)

    actions = Gauge(
        "qa_page_actions",
        "Page-object interactions by action, including wait timeouts",
        ["action"],
        registry=registry,
    )
    for action, count in sorted(summary.actions.items()):
        actions.labels(action=action).set(count)
    return registry


def write_metrics(path: str, summary: SessionMetrics) -> None:
    """Write metrics atomically to the Prometheus textfile collector path."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    # Write-then-rename so the collector never scrapes a partial file.
    tmp_path = target.with_suffix(f"{target.suffix}.tmp")
    tmp_path.write_bytes(generate_latest(build_registry(summary)))
    tmp_path.replace(target)
