"""
Republish re-ingestion batches to the originating stream
"""

import logging
import os
import time
import uuid
from typing import Any, Dict, List, Sequence

import boto3
from botocore.exceptions import ClientError

from firehose_processor.models.records import ReingestBatch, ReingestCandidate, RouteInfo
from firehose_processor.services.errors import ReingestError

logger = logging.getLogger(__name__)

RETRY_ATTEMPTS = int(os.environ.get('RETRY_ATTEMPTS', '20'))
MAX_RETRY_DELAY = 30

THROTTLING_ERROR_CODES = {
    'ProvisionedThroughputExceededException',
    'ServiceUnavailableException',
    'ThrottlingException',
    'Throttling',
}


def create_reingest_client(route: RouteInfo):
    """Create a Kinesis or Firehose client for the route's region"""
    service = 'kinesis' if route.is_stream else 'firehose'
    return boto3.client(service, region_name=route.region)


def to_kinesis_entry(candidate: ReingestCandidate) -> Dict[str, Any]:
    return {
        'Data': candidate.data,
        'PartitionKey': candidate.partition_key or str(uuid.uuid4()),
    }


def to_firehose_entry(candidate: ReingestCandidate) -> Dict[str, Any]:
    return {'Data': candidate.data}


def put_entries(client, route: RouteInfo, entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Send one PutRecords / PutRecordBatch request

    Returns:
        The entries the service reported as failed, in their original order
    """
    if route.is_stream:
        response = client.put_records(StreamName=route.target_name, Records=entries)
        failed_count = response.get('FailedRecordCount', 0)
        results = response.get('Records', [])
    else:
        response = client.put_record_batch(DeliveryStreamName=route.target_name, Records=entries)
        failed_count = response.get('FailedPutCount', 0)
        results = response.get('RequestResponses', [])

    if not failed_count:
        return []

    failed = []
    for entry, result in zip(entries, results):
        if result.get('ErrorCode'):
            logger.debug(f"Entry rejected: {result.get('ErrorCode')}: {result.get('ErrorMessage')}")
            failed.append(entry)
    return failed


def publish_batch(client, route: RouteInfo, batch: ReingestBatch, max_attempts: int = RETRY_ATTEMPTS) -> int:
    """
    Publish one batch, resending only failed entries until all succeed

    Returns:
        Number of attempts used

    Raises:
        ReingestError: If entries are still failing after max_attempts
        ClientError: For non-throttling service errors
    """
    to_entry = to_kinesis_entry if route.is_stream else to_firehose_entry
    pending = [to_entry(candidate) for candidate in batch]
    retry_delay = 1

    for attempt in range(1, max_attempts + 1):
        try:
            pending = put_entries(client, route, pending)
        except ClientError as e:
            error_code = e.response['Error']['Code']
            if error_code not in THROTTLING_ERROR_CODES:
                logger.error(f"Re-ingestion to {route.target_name} failed: {error_code}: {e}")
                raise
            logger.warning(f"Throttled by {route.target_name}, retrying in {retry_delay}s (attempt {attempt}/{max_attempts})")
        else:
            if not pending:
                return attempt
            logger.warning(f"{len(pending)} records failed to re-ingest, retrying (attempt {attempt}/{max_attempts})")

        if attempt < max_attempts:
            time.sleep(retry_delay)
            retry_delay = min(retry_delay * 2, MAX_RETRY_DELAY)

    raise ReingestError(
        f"Could not re-ingest {len(pending)} records to {route.target_name} after {max_attempts} attempts",
        failed_records=len(pending)
    )


def publish_reingest_batches(
    route: RouteInfo,
    batches: Sequence[ReingestBatch],
    client=None,
    max_attempts: int = RETRY_ATTEMPTS
) -> Dict[str, int]:
    """
    Republish every batch to the resolved route

    Args:
        route: Re-ingestion target
        batches: Batches produced by the re-ingestion batcher
        client: Optional boto3 client, created from the route when omitted
        max_attempts: Attempts per batch before giving up

    Returns:
        Dictionary with 'batches', 'records' and 'attempts' counts
    """
    stats = {'batches': 0, 'records': 0, 'attempts': 0}
    if not batches:
        return stats

    if client is None:
        client = create_reingest_client(route)

    kind = 'stream' if route.is_stream else 'delivery stream'
    for batch in batches:
        stats['attempts'] += publish_batch(client, route, batch, max_attempts)
        stats['batches'] += 1
        stats['records'] += len(batch)
        logger.info(f"Re-ingested batch of {len(batch)} records to {kind} {route.target_name} in {route.region}")

    return stats
