"""
Test configuration and fixtures for unit tests
"""
import base64
import os
import sys
from unittest.mock import patch

import pytest
from moto import mock_aws

# Make the tests.utils package importable regardless of how pytest is invoked
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from tests.utils.payloads import (
    CLOUDWATCH_PAYLOAD_B64, DELIVERY_STREAM_ARN, build_envelope, build_firehose_record, compress_envelope
)


@pytest.fixture
def cloudwatch_payload():
    """Captured GZIP payload with three DATA_MESSAGE log events"""
    return base64.b64decode(CLOUDWATCH_PAYLOAD_B64)


@pytest.fixture
def payload_factory():
    """Build compressed payloads from envelope keyword arguments"""
    def _build(message_type="DATA_MESSAGE", log_events=None, **overrides):
        return compress_envelope(build_envelope(message_type, log_events, **overrides))
    return _build


@pytest.fixture
def firehose_event_factory():
    """Build Firehose transformation events from (record_id, payload) pairs"""
    def _build(records, delivery_stream_arn=DELIVERY_STREAM_ARN, source_kinesis_stream_arn=None, partition_key=None):
        event = {
            "invocationId": "invoked123",
            "deliveryStreamArn": delivery_stream_arn,
            "region": "us-east-1",
            "records": [build_firehose_record(record_id, payload, partition_key) for record_id, payload in records],
        }
        if source_kinesis_stream_arn is not None:
            event["sourceKinesisStreamArn"] = source_kinesis_stream_arn
        return event
    return _build


@pytest.fixture
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_SECURITY_TOKEN'] = 'testing'
    os.environ['AWS_SESSION_TOKEN'] = 'testing'
    os.environ['AWS_DEFAULT_REGION'] = 'us-east-1'


@pytest.fixture
def mock_aws_services(aws_credentials):
    """Mock all AWS services."""
    with mock_aws():
        yield


@pytest.fixture
def no_retry_delay():
    """Skip the exponential backoff sleeps in the publisher"""
    with patch('firehose_processor.services.publisher.time.sleep') as mock_sleep:
        yield mock_sleep
