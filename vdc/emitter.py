# vdc/emitter.py

from dataclasses import dataclass

import requests

from vdc.logs import console_logger

TRACE_ID_HEADER = "X-B3-TraceId"
SPAN_ID_HEADER = "X-B3-SpanId"
OPERATION = "vdc-processing"


@dataclass(frozen=True)
class TraceContext:
    trace_id: str
    parent_span_id: str
    operation: str
    message: str
    span_id: str = ""  # spans are minted by the collector, not here

    @classmethod
    def from_headers(cls, headers, *messages):
        """Builds the context from the inbound b3 headers of a request"""
        return cls(
            trace_id=headers.get(TRACE_ID_HEADER, ""),
            parent_span_id=headers.get(SPAN_ID_HEADER, ""),
            operation=OPERATION,
            message=" ".join(messages),
        )

    def to_payload(self):
        return {
            "traceId": self.trace_id,
            "parentSpanId": self.parent_span_id,
            "spanId": self.span_id,
            "operation": self.operation,
            "message": self.message,
        }

class Emitter:
    """
    Writes log and trace events to the console and, when a log agent
    is configured, posts them to it as well. Posting is best effort:
    the agent's answer and any connection problem are ignored.
    """

    def __init__(self, log_endpoint="", trace=False):
        self.log_endpoint = log_endpoint.rstrip("/")
        self.log_enabled = self.log_endpoint != ""
        self.trace_enabled = self.log_enabled and trace
        self.console = console_logger()

    @classmethod
    def from_settings(cls, settings):
        return cls(settings.log_endpoint, settings.trace)

    def _post(self, path, payload):
        try:
            requests.post(f"{self.log_endpoint}{path}", json=payload)
        except requests.exceptions.RequestException:
            pass

    def log(self, message):
        if self.log_enabled:
            # mirrors an omitempty field, an empty message posts {}
            self._post("/v1/log", {"value": message} if message else {})

        self.console.info(f"[Log] {message}")

    def trace(self, headers, *messages):
        """Trace-open event for the operation named by messages"""
        ctx = TraceContext.from_headers(headers, *messages)
        if self.trace_enabled:
            self._post("/v1/trace", ctx.to_payload())

        self.console.info(f"[Trace] {ctx.message}", extra={
            "trace_id": ctx.trace_id,
            "parent_span_id": ctx.parent_span_id,
        })

    def trace_close(self, headers, *messages):
        ctx = TraceContext.from_headers(headers, *messages)
        if self.trace_enabled:
            self._post("/v1/close", ctx.to_payload())

        self.console.info(f"[Close] {ctx.message}", extra={
            "trace_id": ctx.trace_id,
            "parent_span_id": ctx.parent_span_id,
        })
