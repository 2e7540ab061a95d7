"""
Event projector: turn envelope log events into newline-delimited JSON
"""

import json
import logging
from typing import List, Optional

from firehose_processor.models.envelope import LogEnvelope, LogEvent
from firehose_processor.models.records import OutputRecord
from firehose_processor.services.errors import SerializationError

logger = logging.getLogger(__name__)

RECORD_DELIMITER = b"\n"


def to_output_record(envelope: LogEnvelope, event: LogEvent) -> OutputRecord:
    return OutputRecord(
        owner=envelope.owner,
        log_group=envelope.log_group,
        id=event.id,
        timestamp=event.timestamp,
        message=event.message,
    )


def serialize_output_record(record: OutputRecord) -> bytes:
    """
    Encode one output record as compact JSON followed by a newline

    Raises:
        SerializationError: If the record cannot be encoded
    """
    try:
        body = json.dumps(record.to_dict(), separators=(',', ':'), ensure_ascii=False)
        return body.encode('utf-8') + RECORD_DELIMITER
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to encode log event {record.id} to JSON: {str(e)}") from e


def project_log_events(envelope: LogEnvelope, log: Optional[logging.Logger] = None) -> bytes:
    """
    Project every log event of an envelope into the output payload

    Events that fail to serialize are skipped; the remaining events are
    still emitted in their original order.

    Args:
        envelope: Decoded DATA_MESSAGE envelope
        log: Logger used to report skipped events

    Returns:
        Concatenation of one newline-terminated JSON object per log event
    """
    log = log or logger
    chunks: List[bytes] = []

    for event in envelope.log_events:
        try:
            chunks.append(serialize_output_record(to_output_record(envelope, event)))
        except SerializationError as e:
            log.error(f"Skipping log event in group {envelope.log_group}: {str(e)}")

    return b"".join(chunks)
