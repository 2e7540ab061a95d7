"""
Source resolver: determine where oversized records are re-ingested

Upstream identifiers follow the ARN grammar

    arn:<partition>:<service>:<region>:<account-id>:<resource-type>/<resource-name>

for example ``arn:aws:kinesis:us-west-2:123456789012:stream/test`` or
``arn:aws:firehose:us-east-1:123456789012:deliverystream/logs``.
"""

from dataclasses import dataclass
from typing import Optional

from firehose_processor.models.records import RouteInfo
from firehose_processor.services.errors import ConfigurationError, ParseError

ARN_SEGMENTS = ('prefix', 'partition', 'service', 'region', 'account_id', 'resource')
REGION_POSITION = ARN_SEGMENTS.index('region')
RESOURCE_POSITION = ARN_SEGMENTS.index('resource')


@dataclass(frozen=True)
class StreamArn:
    """Typed fields of a stream or delivery stream ARN"""
    partition: str
    service: str
    region: str
    account_id: str
    resource_type: str
    resource_name: str

    @classmethod
    def parse(cls, identifier: str) -> 'StreamArn':
        """
        Parse and validate an upstream identifier

        Raises:
            ParseError: If a required segment is missing or empty
        """
        parts = identifier.split(':', len(ARN_SEGMENTS) - 1)

        if parts[0] != 'arn':
            raise ParseError(identifier, 'prefix', 0, "expected 'arn'")

        if len(parts) <= REGION_POSITION or not parts[REGION_POSITION]:
            raise ParseError(identifier, 'region', REGION_POSITION, "segment missing")

        if len(parts) < len(ARN_SEGMENTS):
            raise ParseError(identifier, 'resource', RESOURCE_POSITION, "segment missing")

        resource = parts[RESOURCE_POSITION]
        resource_type, separator, resource_name = resource.partition('/')
        if not separator or not resource_name:
            raise ParseError(identifier, 'target name', RESOURCE_POSITION, "expected '<type>/<name>'")

        # Nested resource paths only keep the first name segment
        resource_name = resource_name.split('/')[0]
        if not resource_name:
            raise ParseError(identifier, 'target name', RESOURCE_POSITION, "empty name")

        return cls(
            partition=parts[1],
            service=parts[2],
            region=parts[REGION_POSITION],
            account_id=parts[4],
            resource_type=resource_type,
            resource_name=resource_name,
        )


def resolve_source(kinesis_stream_arn: Optional[str], delivery_stream_arn: Optional[str]) -> RouteInfo:
    """
    Resolve the re-ingestion route from two mutually exclusive identifiers

    Args:
        kinesis_stream_arn: ARN of the Kinesis data stream feeding the delivery stream
        delivery_stream_arn: ARN of the delivery stream itself (direct PUT sources)

    Returns:
        RouteInfo with the stream flag, region and target name

    Raises:
        ConfigurationError: If both or neither identifiers are supplied
        ParseError: If the supplied identifier is malformed
    """
    kinesis_stream_arn = kinesis_stream_arn or ''
    delivery_stream_arn = delivery_stream_arn or ''

    if kinesis_stream_arn and delivery_stream_arn:
        raise ConfigurationError("invalid parameters, both kinesis and firehose streams specified")
    if not kinesis_stream_arn and not delivery_stream_arn:
        raise ConfigurationError("invalid parameters, neither kinesis nor firehose stream specified")

    is_stream = bool(kinesis_stream_arn)
    arn = StreamArn.parse(kinesis_stream_arn if is_stream else delivery_stream_arn)

    return RouteInfo(is_stream=is_stream, region=arn.region, target_name=arn.resource_name)
