"""
Pydantic models for the Kinesis Data Firehose transformation event
"""

import base64
import binascii
import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from firehose_processor.models.records import RawRecord

logger = logging.getLogger(__name__)


class KinesisRecordMetadata(BaseModel):
    """Metadata present when the delivery stream reads from a Kinesis data stream"""
    model_config = ConfigDict(populate_by_name=True)

    shard_id: Optional[str] = Field(default=None, alias="shardId")
    partition_key: Optional[str] = Field(default=None, alias="partitionKey")
    approximate_arrival_timestamp: Optional[int] = Field(default=None, alias="approximateArrivalTimestamp")
    sequence_number: Optional[str] = Field(default=None, alias="sequenceNumber")
    subsequence_number: Optional[int] = Field(default=None, alias="subsequenceNumber")


class FirehoseEventRecord(BaseModel):
    """A single record as delivered to the transformation function"""
    model_config = ConfigDict(populate_by_name=True)

    record_id: str = Field(..., alias="recordId")
    data: str = Field(default="", description="Base64 encoded record payload")
    approximate_arrival_timestamp: Optional[int] = Field(default=None, alias="approximateArrivalTimestamp")
    kinesis_record_metadata: Optional[KinesisRecordMetadata] = Field(default=None, alias="kinesisRecordMetadata")

    def to_raw_record(self) -> RawRecord:
        """
        Decode the base64 payload into a RawRecord

        Payloads that are not valid base64 are replaced by an empty payload so the
        record fails envelope decoding instead of aborting the batch.
        """
        try:
            payload = base64.b64decode(self.data, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.warning(f"Record {self.record_id} has invalid base64 data: {str(e)}")
            payload = b""

        partition_key = None
        if self.kinesis_record_metadata is not None:
            partition_key = self.kinesis_record_metadata.partition_key

        return RawRecord(record_id=self.record_id, data=payload, partition_key=partition_key)


class FirehoseEvent(BaseModel):
    """Transformation event sent by Kinesis Data Firehose to Lambda"""
    model_config = ConfigDict(populate_by_name=True)

    invocation_id: Optional[str] = Field(default=None, alias="invocationId")
    delivery_stream_arn: Optional[str] = Field(default=None, alias="deliveryStreamArn")
    source_kinesis_stream_arn: Optional[str] = Field(default=None, alias="sourceKinesisStreamArn")
    region: Optional[str] = Field(default=None)
    records: List[FirehoseEventRecord]

    def to_raw_records(self) -> List[RawRecord]:
        return [record.to_raw_record() for record in self.records]
