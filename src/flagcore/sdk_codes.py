"""Operator-facing log messages keyed by numeric SDK codes.

Every SDK of the family logs the same codes for the same lifecycle events so
that operators can grep for them regardless of language. Codes are grouped by
subsystem: 1xxx init, 2xxx auth, 3xxx close, 4xxx poll, 5xxx stream,
6xxx evaluation and 7xxx metrics.

The helpers never raise; logging must not interfere with flag evaluation.
"""

from __future__ import annotations

import json
import logging
from typing import Any

__all__ = [
    "SDK_CODES",
    "debug_eval_success",
    "format_sdk_message",
    "get_sdk_message",
    "info_metrics_success",
    "info_metrics_target_exceeded",
    "info_metrics_thread_exited",
    "info_metrics_thread_started",
    "info_sdk_close_success",
    "info_sdk_init_ok",
    "info_sdk_start_close",
    "warn_default_variation_served",
    "warn_post_metrics_failed",
]

logger = logging.getLogger(__name__)

SDK_CODES: dict[int, str] = {
    # init
    1000: "The SDK has successfully initialized",
    1001: "The SDK has failed to initialize due to an authentication error - defaults will be served",
    1002: "The SDK has failed to initialize due to a missing or empty API key - defaults will be served",
    # auth
    2000: "Authentication was successful",
    2001: "Authentication failed with a non-recoverable error",
    2002: "Authentication attempt failed:",
    2003: "Authentication failed and max retries have been exceeded",
    # close
    3000: "Closing SDK",
    3001: "SDK Closed successfully",
    # poll
    4000: "Polling started, interval:",
    4001: "Polling stopped",
    # stream
    5000: "SSE stream successfully connected",
    5001: "SSE stream disconnected, reason:",
    5002: "SSE event received: ",
    5003: "SSE retrying to connect in",
    5004: "SSE stopped",
    # evaluation
    6000: "Evaluation successful: ",
    6001: "Evaluation Failed, returning default variation: ",
    # metrics
    7000: "Metrics thread started with request interval:",
    7001: "Metrics stopped",
    7002: "Posting metrics failed, reason:",
    7003: "Metrics posted successfully",
    7004: "Target metrics exceeded max size, remaining targets for this analytics interval will not be sent",
}


def get_sdk_message(code: int) -> str:
    """Return the description for ``code``, or ``Unknown SDK code``."""
    return SDK_CODES.get(code, "Unknown SDK code")


def format_sdk_message(code: int, append: Any = "") -> str:
    """Render ``SDKCODE:<code>: <description> <append>``."""
    return f"SDKCODE:{code}: {get_sdk_message(code)} {append}"


def _emit(level: int, code: int, append: Any = "", log: logging.Logger | None = None) -> None:
    try:
        (log or logger).log(level, format_sdk_message(code, append))
    except Exception:  # noqa: BLE001
        pass


def _describe_target(target: Any) -> str:
    try:
        if hasattr(target, "to_dict"):
            return json.dumps(target.to_dict(), default=str, separators=(",", ":"))
        return json.dumps(target, default=str, separators=(",", ":"))
    except (TypeError, ValueError):
        return repr(target)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def info_sdk_init_ok(log: logging.Logger | None = None) -> None:
    _emit(logging.INFO, 1000, log=log)


def info_sdk_start_close(log: logging.Logger | None = None) -> None:
    _emit(logging.INFO, 3000, log=log)


def info_sdk_close_success(log: logging.Logger | None = None) -> None:
    _emit(logging.INFO, 3001, log=log)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def debug_eval_success(result: Any, flag_key: str, target: Any, log: logging.Logger | None = None) -> None:
    active = log or logger
    # skip target serialization on the hot path unless debug output is wanted
    if not active.isEnabledFor(logging.DEBUG):
        return
    _emit(
        logging.DEBUG,
        6000,
        f"result={result}, flag identifier={flag_key}, target={_describe_target(target)}",
        active,
    )


def warn_default_variation_served(
    flag_key: str,
    target: Any,
    default: Any,
    log: logging.Logger | None = None,
) -> None:
    _emit(
        logging.WARNING,
        6001,
        f"default variation used={default}, flag={flag_key}, target={_describe_target(target)}",
        log,
    )


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


def info_metrics_thread_started(interval: float, log: logging.Logger | None = None) -> None:
    _emit(logging.INFO, 7000, f"{interval:g} seconds", log)


def info_metrics_thread_exited(log: logging.Logger | None = None) -> None:
    _emit(logging.INFO, 7001, log=log)


def warn_post_metrics_failed(reason: Any, log: logging.Logger | None = None) -> None:
    _emit(logging.WARNING, 7002, reason, log)


def info_metrics_success(log: logging.Logger | None = None) -> None:
    _emit(logging.INFO, 7003, log=log)


def info_metrics_target_exceeded(log: logging.Logger | None = None) -> None:
    _emit(logging.INFO, 7004, log=log)
