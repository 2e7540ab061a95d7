"""
Unit tests for the source resolver
"""
import pytest

from firehose_processor.models.records import RouteInfo
from firehose_processor.services.errors import ConfigurationError, ParseError, SourceResolutionError
from firehose_processor.services.source import StreamArn, resolve_source
from tests.utils.payloads import DELIVERY_STREAM_ARN, KINESIS_STREAM_ARN


class TestResolveSource:
    """Test resolution of the re-ingestion route."""

    def test_kinesis_stream(self):
        """Test resolving a Kinesis data stream source."""
        assert resolve_source(KINESIS_STREAM_ARN, "") == RouteInfo(is_stream=True, region="us-west-2", target_name="test")

    def test_delivery_stream(self):
        """Test resolving a direct PUT delivery stream source."""
        assert resolve_source("", DELIVERY_STREAM_ARN) == RouteInfo(
            is_stream=False, region="us-east-1", target_name="firehoseTest"
        )

    def test_none_is_treated_as_empty(self):
        """Test that a missing identifier behaves like an empty one."""
        assert resolve_source(None, DELIVERY_STREAM_ARN).target_name == "firehoseTest"

    @pytest.mark.parametrize("kinesis_arn,firehose_arn", [
        (KINESIS_STREAM_ARN, "arn:aws:firehose:us-east-1:123456789012:deliverystream/firehose"),
        ("someRandomString", "someRandomString"),
    ])
    def test_both_identifiers_rejected(self, kinesis_arn, firehose_arn):
        """Test that supplying both identifiers is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_source(kinesis_arn, firehose_arn)
        assert str(exc_info.value) == "invalid parameters, both kinesis and firehose streams specified"

    def test_neither_identifier_rejected(self):
        """Test that supplying no identifier is a configuration error."""
        with pytest.raises(ConfigurationError):
            resolve_source("", "")

    @pytest.mark.parametrize("kinesis_arn,firehose_arn", [
        ("someRandomString", ""),
        ("", "someRandomString"),
        ("arn:aws:kinesis:us-west-2:123456789012:invalidArn", ""),
        ("arn:aws:kinesis", ""),
        ("arn:aws:kinesis:us-west-2", ""),
        ("", "arn:aws:firehose:us-east-1:123456789012:deliverystream/"),
    ])
    def test_malformed_identifiers(self, kinesis_arn, firehose_arn):
        """Test that malformed identifiers raise ParseError."""
        with pytest.raises(ParseError):
            resolve_source(kinesis_arn, firehose_arn)

    def test_errors_share_a_base_class(self):
        """Test that callers can catch every resolution failure at once."""
        assert issubclass(ConfigurationError, SourceResolutionError)
        assert issubclass(ParseError, SourceResolutionError)


class TestStreamArn:
    """Test the ARN grammar."""

    def test_parse_all_fields(self):
        """Test that every ARN segment is exposed as a typed field."""
        arn = StreamArn.parse(KINESIS_STREAM_ARN)

        assert arn.partition == "aws"
        assert arn.service == "kinesis"
        assert arn.region == "us-west-2"
        assert arn.account_id == "123456789012"
        assert arn.resource_type == "stream"
        assert arn.resource_name == "test"

    def test_nested_resource_keeps_first_name_segment(self):
        """Test that only the first name segment after the type is used."""
        arn = StreamArn.parse("arn:aws:kinesis:us-west-2:123456789012:stream/test/extra")
        assert arn.resource_name == "test"

    def test_missing_region_reports_position(self):
        """Test that a missing region reports its segment position."""
        with pytest.raises(ParseError) as exc_info:
            StreamArn.parse("arn:aws:kinesis")

        assert exc_info.value.segment == "region"
        assert exc_info.value.position == 3
        assert "segment 3" in str(exc_info.value)

    def test_missing_target_name_reports_position(self):
        """Test that a resource without a name reports the resource position."""
        with pytest.raises(ParseError) as exc_info:
            StreamArn.parse("arn:aws:kinesis:us-west-2:123456789012:invalidArn")

        assert exc_info.value.segment == "target name"
        assert exc_info.value.position == 5
        assert exc_info.value.identifier == "arn:aws:kinesis:us-west-2:123456789012:invalidArn"

    def test_missing_prefix(self):
        """Test that identifiers must start with 'arn'."""
        with pytest.raises(ParseError) as exc_info:
            StreamArn.parse("someRandomString")
        assert exc_info.value.position == 0

    def test_parse_error_without_reason(self):
        """Test that the reason is optional in the error message."""
        error = ParseError("arn:aws", "region", 3)

        assert str(error) == "unable to parse region at segment 3: 'arn:aws'"
        assert error.position == 3
