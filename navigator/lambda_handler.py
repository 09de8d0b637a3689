"""
AWS Lambda handler: parses the request, calls Navigator, maps the outcome to a status code.
Adds structured, JSON CloudWatch-friendly logs with correlation IDs.

PURPOSE:
- Entry point for AWS Lambda behind API Gateway (proxy integration).
- Status codes: 200 ok, 400 no_input or InvalidRequest, 404 no_match,
  500 anything else (market feed failures, output schema violations, engine bugs).

CONTEXT:
- Logging includes request_id and correlation_id so traces are easy to follow in CloudWatch.

CREDITS:
- Original work – no external code reuse.
"""

from __future__ import annotations
import json
import time
import traceback
import uuid
from typing import Any, Dict

from navigator.logging_setup import configure_logging
from navigator.navigator import Navigator
from navigator.navigator_io import InvalidRequest
from navigator.observability import init_observability
from navigator.recommendations import STATUS_OK, STATUS_NO_INPUT, STATUS_NO_MATCH


# Configure a structured logger once; emits JSON key/value logs.
log = configure_logging()
init_observability()

STATUS_CODES = {STATUS_OK: 200, STATUS_NO_INPUT: 400, STATUS_NO_MATCH: 404}


def _response(body: Dict[str, Any], status_code: int = 200) -> Dict[str, Any]:
    """
    Wrap a Python dict into an API Gateway compatible response.

    returns:
    - dict – {"statusCode": int, "headers": {...}, "body": "<json-string>"}.
    """
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body, default=str),
    }


def _error(message: str, t0: float, status_code: int) -> Dict[str, Any]:
    latency_ms = round((time.time() - t0) * 1000, 1)
    body = {"status": "error", "messages": [message], "latency_ms": latency_ms}
    return _response(body, status_code)


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """
    Lambda entry point.

    flow:
    1) Bind request/correlation IDs for traceability.
    2) Normalise body (JSON string under "body", a dict under "body", or the event itself).
    3) Run Navigator.handle(body).
    4) Map the result status or the raised exception to an HTTP status code.

    returns:
    - dict – API Gateway compatible response with JSON body.
    """
    t0 = time.time()

    event = event if isinstance(event, dict) else {}
    request_id = getattr(context, "aws_request_id", None) or str(uuid.uuid4())
    correlation_id = (event.get("headers") or {}).get("x-correlation-id") or str(uuid.uuid4())
    rlog = log.bind(request_id=request_id, correlation_id=correlation_id)
    rlog.info("request.received", event_type=type(event).__name__)

    body: Any = event
    if "body" in event:
        try:
            body = json.loads(event["body"]) if isinstance(event["body"], str) else (event["body"] or {})
        except ValueError:
            rlog.warning("request.body_parse_failed")
            return _error("Request body is not valid JSON.", t0, 400)

    if not isinstance(body, dict):
        return _error("Request body must be a JSON object.", t0, 400)

    try:
        result = Navigator().handle(body)
    except InvalidRequest as e:
        latency_ms = round((time.time() - t0) * 1000, 1)
        rlog.warning("response.bad_request", error=str(e), latency_ms=latency_ms)
        return _error(str(e), t0, 400)
    except Exception as e:
        latency_ms = round((time.time() - t0) * 1000, 1)
        rlog.error(
            "response.error",
            error=str(e),
            traceback=traceback.format_exc(limit=2),
            latency_ms=latency_ms,
        )
        return _error(f"{type(e).__name__}: {e}", t0, 500)

    status_code = STATUS_CODES.get(result.get("status"), 500)
    latency_ms = round((time.time() - t0) * 1000, 1)
    rlog.info("response.success", status=result.get("status"), status_code=status_code, latency_ms=latency_ms)
    return _response(result, status_code)
