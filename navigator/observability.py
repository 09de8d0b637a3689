"""
Observability bootstrap.

PURPOSE:
- Optionally enables AWS X-Ray tracing when USE_XRAY=1, patching requests and boto3 so
  market-feed and session-store calls show up as subsegments.
- Degrades to a no-op when X-Ray is disabled or the recorder cannot be configured.

CONTEXT:
- Called once by the HTTP handler. Logging is configured separately in logging_setup.py.
"""
from __future__ import annotations
import os


def init_observability():
    """
    Optionally initialise AWS X-Ray instrumentation.

    returns:
    - xray_recorder if tracing was configured, None if disabled or setup failed.
    """
    if os.getenv("USE_XRAY", "0") != "1":
        return None
    try:
        from aws_xray_sdk.core import xray_recorder, patch_all
        xray_recorder.configure(service=os.getenv("XRAY_SERVICE_NAME", "PendleNavigator"))
        patch_all()
        return xray_recorder
    except Exception:
        # Tracing must never take the service down.
        return None


class xray_segment:
    """
    Context manager for a manual subsegment.

    >>> with xray_segment("recommendations"):
    ...     result = run_pipeline(payload, markets)

    Opens a subsegment only when USE_XRAY=1; otherwise does nothing.
    """

    def __init__(self, name: str):
        self.name = name
        self.sub = None

    def __enter__(self):
        if os.getenv("USE_XRAY", "0") != "1":
            return self
        try:
            from aws_xray_sdk.core import xray_recorder
            self.sub = xray_recorder.begin_subsegment(self.name)
        except Exception:
            self.sub = None
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.sub is None:
            return False
        try:
            from aws_xray_sdk.core import xray_recorder
            xray_recorder.end_subsegment()
        except Exception:
            pass
        return False
