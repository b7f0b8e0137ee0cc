import copy
import logging


class CorrelationFormatter(logging.Formatter):
    """Prefix messages with a short correlation ID when the record carries one.

    Streaming sessions tag their records with ``extra={"correlation_id": ...}``
    so interleaved sessions can be told apart. The record itself is left
    untouched, since other handlers may format it too.
    """

    def format(self, record: logging.LogRecord) -> str:
        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            record = copy.copy(record)
            record.msg = f"[{correlation_id[:8]}] {record.msg}"
        return super().format(record)
