"""Prometheus metrics for monitoring health scores, debt plans and allocation outcomes"""

from prometheus_client import Counter, Histogram

# Engine metrics
recommendation_counter = Counter(
    "finrec_recommendation_total",
    "Recommendations computed",
    ["component"],  # report | health | debt_plan | suggestions | allocation | forecast | preparedness
)

health_score_histogram = Histogram(
    "finrec_health_score",
    "Financial health scores issued",
    buckets=[20, 40, 60, 80, 100],
)

allocation_outcome_counter = Counter(
    "finrec_allocation_outcome_total",
    "Allocation results by outcome",
    ["outcome"],  # surplus | deficit
)

debt_plan_counter = Counter(
    "finrec_debt_plan_total",
    "Debt plans by strategy and state",
    ["strategy", "state"],  # state: in_debt | debt_free
)

invalid_input_counter = Counter(
    "finrec_invalid_input_total",
    "Requests rejected by domain validation",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_health(score: float) -> None:
    health_score_histogram.observe(score)


def record_allocation(is_deficit: bool) -> None:
    allocation_outcome_counter.labels(outcome="deficit" if is_deficit else "surplus").inc()


def record_debt_plan(strategy: str, debt_count: int) -> None:
    state = "debt_free" if debt_count == 0 else "in_debt"
    debt_plan_counter.labels(strategy=strategy, state=state).inc()
