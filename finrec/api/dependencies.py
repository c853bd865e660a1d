"""Dependency helpers shared by the v1 routers"""

import logging
import time
from datetime import date
from typing import Any, Callable, Optional, TypeVar

from fastapi import HTTPException, Request

from finrec.domain.exceptions import DomainException
from finrec.infrastructure.observability.logging import log_report
from finrec.infrastructure.observability.metrics import invalid_input_counter, recommendation_counter

T = TypeVar("T")


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def evaluation_date(as_of: Optional[date]) -> date:
    """The only wall-clock read: requests without as_of are evaluated today"""
    return as_of or date.today()


def run_component(
    request_id: str,
    component: str,
    compute: Callable[[], T],
    summary: Callable[[T], dict[str, Any]] = lambda _: {},
) -> T:
    """
    Run a domain computation with timing, logging and error mapping.

    - DomainException → 422 (bad records that passed schema validation)
    - anything else   → 500
    """
    start_time = time.time()
    try:
        result = compute()
    except DomainException as e:
        invalid_input_counter.inc()
        logging.warning(f"Invalid financial data: {e}", extra={"request_id": request_id, "component": component})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "component": component})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    recommendation_counter.labels(component=component).inc()
    log_report(request_id, component, duration_ms, **summary(result))
    return result
