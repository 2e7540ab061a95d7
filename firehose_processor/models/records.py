"""
Per-record data types for transformation results and re-ingestion
"""

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class Result(str, Enum):
    """Transformation result tags understood by Kinesis Data Firehose"""
    OK = "Ok"
    DROPPED = "Dropped"
    PROCESSING_FAILED = "ProcessingFailed"


@dataclass(frozen=True)
class RawRecord:
    """One incoming delivery-stream record"""
    record_id: str
    data: bytes
    partition_key: Optional[str] = None


@dataclass(frozen=True)
class OutputRecord:
    """Projection of one log event merged with its envelope's routing fields"""
    owner: str
    log_group: str
    id: str
    timestamp: int
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'owner': self.owner,
            'logGroup': self.log_group,
            'id': self.id,
            'timestamp': self.timestamp,
            'message': self.message,
        }


@dataclass(frozen=True)
class Ok:
    """Record transformed successfully; data is the newline-delimited payload"""
    record_id: str
    data: bytes = b""
    result = Result.OK

    def to_response(self) -> Dict[str, Any]:
        return {
            'recordId': self.record_id,
            'result': self.result.value,
            'data': base64.b64encode(self.data).decode('ascii'),
        }


@dataclass(frozen=True)
class Dropped:
    """Record intentionally discarded (control message or re-ingested)"""
    record_id: str
    result = Result.DROPPED

    def to_response(self) -> Dict[str, Any]:
        return {'recordId': self.record_id, 'result': self.result.value}


@dataclass(frozen=True)
class ProcessingFailed:
    """Record that could not be decoded or has an unsupported message type"""
    record_id: str
    result = Result.PROCESSING_FAILED

    def to_response(self) -> Dict[str, Any]:
        return {'recordId': self.record_id, 'result': self.result.value}


Outcome = Union[Ok, Dropped, ProcessingFailed]


def demote(outcome: Outcome) -> Dropped:
    """
    Transition an Ok outcome to Dropped, clearing its payload

    Args:
        outcome: Outcome to demote, must be Ok

    Returns:
        Dropped outcome carrying the same record id

    Raises:
        TypeError: If the outcome is not Ok
    """
    if not isinstance(outcome, Ok):
        raise TypeError(f"Only Ok outcomes can be demoted, got {type(outcome).__name__} for record {outcome.record_id}")
    return Dropped(record_id=outcome.record_id)


@dataclass(frozen=True)
class ReingestCandidate:
    """Original record bytes kept aside in case the record has to be republished"""
    data: bytes
    partition_key: Optional[str] = None


@dataclass
class ReingestBatch:
    """Ordered group of candidates destined for a single republish call"""
    candidates: List[ReingestCandidate] = field(default_factory=list)

    def append(self, candidate: ReingestCandidate) -> None:
        self.candidates.append(candidate)

    def __len__(self) -> int:
        return len(self.candidates)

    def __iter__(self):
        return iter(self.candidates)


@dataclass(frozen=True)
class RouteInfo:
    """Where re-ingested records are republished"""
    is_stream: bool
    region: str
    target_name: str
