"""
Check orchestration engine.

Coordinates the execution of all DNS checks (SPF, DMARC, DKIM, MX, BIMI,
MTA-STS) for a single domain.  Handles:
- Running the six checks concurrently via ThreadPoolExecutor
- Isolating each check so one failure never aborts the others
- Bounding the whole analysis with a deadline
- Assembling the Report in a fixed mechanism order
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Callable

from authcheck.checker.bimi import check_bimi
from authcheck.checker.dkim import check_dkim
from authcheck.checker.dmarc import check_dmarc
from authcheck.checker.mta_sts import check_mta_sts
from authcheck.checker.mx import check_mx
from authcheck.checker.providers import DEFAULT_PROVIDER
from authcheck.checker.spf import check_spf
from authcheck.models import STATUS_ERROR, CheckResult, DnsSettings

logger = logging.getLogger(__name__)

# Report order; also the set of mechanisms every Report contains
MECHANISMS: tuple[str, ...] = ("SPF", "DMARC", "DKIM", "MX", "BIMI", "MTA-STS")

DEFAULT_DEADLINE_SECONDS = 30.0

Report = dict[str, CheckResult]


def run_domain_check(
    domain: str,
    esp: str | None = DEFAULT_PROVIDER,
    settings: DnsSettings | None = None,
    deadline_seconds: float = DEFAULT_DEADLINE_SECONDS,
) -> Report:
    """Run all DNS checks for *domain* and return the Report.

    Args:
        domain: The domain name to analyse.
        esp: Email service provider key used to pick DKIM selectors.
        settings: Optional DnsSettings shared by every check.
        deadline_seconds: Upper bound for the whole analysis; checks still
            running afterwards are reported as errors.

    Returns:
        A dict mapping each mechanism name to its CheckResult, in
        MECHANISMS order.
    """
    start_time = time.monotonic()
    cancel_event = threading.Event()

    checks: dict[str, Callable[[], CheckResult]] = {
        "SPF": lambda: check_spf(domain, settings),
        "DMARC": lambda: check_dmarc(domain, settings),
        "DKIM": lambda: check_dkim(domain, esp, settings, cancel_event),
        "MX": lambda: check_mx(domain, settings),
        "BIMI": lambda: check_bimi(domain, settings),
        "MTA-STS": lambda: check_mta_sts(domain, settings),
    }

    executor = ThreadPoolExecutor(max_workers=len(checks), thread_name_prefix="authcheck")
    try:
        futures = {
            name: executor.submit(_run_safe_check, name, check_fn)
            for name, check_fn in checks.items()
        }
        _, not_done = wait(futures.values(), timeout=deadline_seconds)
    finally:
        # Stragglers are abandoned, not joined
        cancel_event.set()
        executor.shutdown(wait=False, cancel_futures=True)

    report: Report = {}
    for name in MECHANISMS:
        future = futures[name]
        if future in not_done:
            logger.warning("%s check for %s did not finish within %.1fs", name, domain, deadline_seconds)
            report[name] = CheckResult(
                name=name,
                status=STATUS_ERROR,
                info="Check timed out.",
                error=f"{name} check exceeded the {deadline_seconds:g}s deadline",
            )
        else:
            report[name] = future.result()

    elapsed_ms = int((time.monotonic() - start_time) * 1000)
    passed_count = sum(1 for result in report.values() if result.passed)
    logger.info(
        "Check completed for %s (esp=%s): %d/%d passed (%s), elapsed=%dms",
        domain,
        esp,
        passed_count,
        len(report),
        ", ".join(f"{name}={result.status}" for name, result in report.items()),
        elapsed_ms,
    )
    return report


def report_to_dict(report: Report) -> dict[str, dict[str, Any]]:
    """Serialise *report* to a JSON-ready dict, keeping mechanism order."""
    return {name: result.to_dict() for name, result in report.items()}


def _run_safe_check(check_name: str, check_fn: Callable[[], CheckResult]) -> CheckResult:
    """Execute a check function with error isolation.

    Checks are expected to turn every DNS fault into an error result
    themselves; an exception reaching this point is a defect, logged with
    its traceback and reported as an error result for that check only.

    Args:
        check_name: Mechanism name used for logging and the fallback result.
        check_fn: A callable that returns a CheckResult.

    Returns:
        The check's CheckResult, or an error CheckResult if it raised.
    """
    try:
        return check_fn()
    except Exception as exc:
        logger.exception("Error in %s check", check_name)
        return CheckResult(
            name=check_name,
            status=STATUS_ERROR,
            info="Check failed unexpectedly.",
            error=f"{check_name} check failed: {exc}",
        )
