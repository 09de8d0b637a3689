"""
Structured logging setup for Lambda & local development.

PURPOSE:
- Configure consistent JSON logs for both AWS Lambda and local runs, so request
  traces can be queried in CloudWatch Insights.

CONTEXT:
- Used by the HTTP handler and Navigator. structlog adds timestamps, level and
  service metadata to every event.
"""

from __future__ import annotations
import logging
import os
import sys
import structlog

SERVICE_NAME = "PendleNavigator"


def configure_logging():
    """
    Configure structured JSON logging for the current environment.

    returns:
    - structlog.BoundLogger – logger bound with service and env.

    behaviour:
    - LOG_LEVEL sets the level (default INFO); ENV tags the environment (default dev).
    - Logs go to stdout, which Lambda forwards to CloudWatch.

    example log entry:
    {"event": "response.success", "level": "info", "timestamp": "2026-10-19T13:00:00Z",
     "service": "PendleNavigator", "env": "dev", "status_code": 200, "latency_ms": 12.4}
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger().bind(service=SERVICE_NAME, env=os.getenv("ENV", "dev"))
