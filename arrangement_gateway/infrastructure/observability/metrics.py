"""Prometheus metrics for monitoring plan submissions, rejections, and API performance"""

from prometheus_client import Counter, Histogram

from arrangement_gateway.domain.validation import RejectionReason

# Submission metrics
plan_submission_counter = Counter(
    "arrangement_plan_submissions_total",
    "Arrangement plan submissions",
    ["plan_type", "outcome"],  # outcome: accepted | rejected
)

plan_rejection_counter = Counter(
    "arrangement_plan_rejections_total",
    "Rejected arrangement plan submissions by reason",
    ["reason"],
)

# Arrangement options API metrics
arrangements_api_latency_histogram = Histogram(
    "arrangements_api_latency_seconds",
    "Arrangement options API response time",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

arrangements_api_failures_counter = Counter(
    "arrangements_api_failures_total",
    "Failed arrangement options API calls",
    ["operation"],
)


def record_submission(plan_type: str, accepted: bool, reason: RejectionReason | None = None) -> None:
    """Record submission outcome; rejections are also bucketed by reason"""
    outcome = "accepted" if accepted else "rejected"
    plan_submission_counter.labels(plan_type=plan_type, outcome=outcome).inc()

    if not accepted and reason is not None:
        plan_rejection_counter.labels(reason=reason.value).inc()
