"""
Envelope codec: gunzip and parse CloudWatch Logs subscription payloads
"""

import gzip
import json
import zlib

from pydantic import ValidationError

from firehose_processor.models.envelope import LogEnvelope
from firehose_processor.services.errors import DecodeError


def decode_envelope(payload: bytes) -> LogEnvelope:
    """
    Decompress and parse one record payload into a LogEnvelope

    Decoding is all-or-nothing: either a complete envelope is returned or
    DecodeError is raised.

    Args:
        payload: GZIP compressed JSON envelope

    Returns:
        Parsed LogEnvelope

    Raises:
        DecodeError: If the payload is not valid GZIP or not a well-formed envelope
    """
    try:
        document = gzip.decompress(payload)
    except (OSError, EOFError, zlib.error) as e:
        raise DecodeError(f"Failed to decompress record payload: {str(e)}") from e

    try:
        parsed = json.loads(document.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"Failed to parse record payload as JSON: {str(e)}") from e

    if not isinstance(parsed, dict):
        raise DecodeError(f"Expected a JSON object envelope, got {type(parsed).__name__}")

    try:
        return LogEnvelope.model_validate(parsed)
    except ValidationError as e:
        raise DecodeError(f"Invalid log envelope: {str(e)}") from e


def encode_envelope(envelope: LogEnvelope) -> bytes:
    """Serialize and compress an envelope in the format CloudWatch Logs delivers it"""
    document = envelope.model_dump_json(by_alias=True)
    return gzip.compress(document.encode('utf-8'))
