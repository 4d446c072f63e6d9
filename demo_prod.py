"""Smoke test — reports one real exception through the configured sinks.

Usage:
    FAULTLINE_FILE_PATH=errors.log python demo_prod.py
"""

from __future__ import annotations

import logging

from faultline import ErrorDispatcher, FaultlineSettings


def main() -> None:
    """Report a sample failure and print each sink's outcome."""
    settings = FaultlineSettings()
    logging.basicConfig(level=settings.log_level)
    print(f"Faultline smoke test | Environment: {settings.environment}")

    with ErrorDispatcher.from_settings(settings) as dispatcher:
        try:
            try:
                {}["config"]
            except KeyError as exc:
                raise RuntimeError("Smoke test failure") from exc
        except RuntimeError as exc:
            outcomes = dispatcher.report_exception(exc, context={"component": "demo"})

    if not outcomes:
        print("No sinks configured — set FAULTLINE_FILE_PATH or FAULTLINE_WEBHOOK_URL")
    for outcome in outcomes:
        status = "OK" if outcome.delivered else f"FAILED ({outcome.failure.value}: {outcome.reason})"
        print(f"  [{outcome.sink_name}] {status}")


if __name__ == "__main__":
    main()
