"""
Record classifier: decide the outcome of every incoming record
"""

import logging
from typing import List, Optional, Sequence, Tuple, Union

from firehose_processor.models.envelope import LogEnvelope, MessageType
from firehose_processor.models.records import (
    Dropped, Ok, Outcome, ProcessingFailed, RawRecord, ReingestCandidate
)
from firehose_processor.services.codec import decode_envelope
from firehose_processor.services.errors import DecodeError
from firehose_processor.services.projector import project_log_events

logger = logging.getLogger(__name__)


def classify_record(
    record_id: str,
    envelope: Union[LogEnvelope, DecodeError],
    log: Optional[logging.Logger] = None
) -> Outcome:
    """
    Map a decoded envelope (or its decode failure) to exactly one outcome

    - CONTROL_MESSAGE -> Dropped
    - DATA_MESSAGE -> Ok with the projected log events
    - anything else, including a decode failure -> ProcessingFailed
    """
    if isinstance(envelope, DecodeError):
        return ProcessingFailed(record_id=record_id)

    if envelope.message_type is MessageType.CONTROL:
        return Dropped(record_id=record_id)

    if envelope.message_type is MessageType.DATA:
        return Ok(record_id=record_id, data=project_log_events(envelope, log))

    return ProcessingFailed(record_id=record_id)


def process_record(record: RawRecord, log: Optional[logging.Logger] = None) -> Outcome:
    """Decode and classify a single raw record"""
    log = log or logger
    try:
        envelope = decode_envelope(record.data)
    except DecodeError as e:
        log.warning(f"Failed to decode record {record.record_id}: {str(e)}")
        return classify_record(record.record_id, e, log)

    outcome = classify_record(record.record_id, envelope, log)
    if isinstance(outcome, ProcessingFailed):
        log.warning(f"Record {record.record_id} has unsupported message type, marking as failed")
    return outcome


def create_reingest_candidate(record: RawRecord, is_stream: bool) -> ReingestCandidate:
    """
    Keep the original bytes of a record for possible re-ingestion

    The partition key is only meaningful for Kinesis data streams and is
    omitted for delivery streams.
    """
    if is_stream:
        return ReingestCandidate(data=record.data, partition_key=record.partition_key)
    return ReingestCandidate(data=record.data)


def process_records(
    records: Sequence[RawRecord],
    is_stream: bool,
    log: Optional[logging.Logger] = None
) -> Tuple[List[Outcome], List[ReingestCandidate]]:
    """
    Classify a batch of records and derive their re-ingestion candidates

    Args:
        records: Incoming records in delivery order
        is_stream: Whether the upstream source is a Kinesis data stream

    Returns:
        Tuple of (outcomes, candidates), both parallel to records
    """
    outcomes: List[Outcome] = []
    candidates: List[ReingestCandidate] = []

    for record in records:
        outcomes.append(process_record(record, log))
        candidates.append(create_reingest_candidate(record, is_stream))

    return outcomes, candidates
