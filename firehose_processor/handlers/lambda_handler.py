"""
AWS Lambda handler for Kinesis Data Firehose record transformation

CloudWatch Logs subscription filters deliver GZIP compressed JSON envelopes.
Each record is decoded, control messages are dropped, data messages are
turned into newline-delimited JSON log lines, and records that would push the
response past the Lambda payload limit are republished to the source stream.
"""

import os
from collections import Counter
from typing import Any, Dict, Optional, Tuple

from firehose_processor.models.firehose import FirehoseEvent
from firehose_processor.models.records import RouteInfo
from firehose_processor.services.classifier import process_records
from firehose_processor.services.errors import SourceResolutionError
from firehose_processor.services.publisher import publish_reingest_batches
from firehose_processor.services.reingest import plan_reingestion
from firehose_processor.services.source import resolve_source
from firehose_processor.utils.logger import setup_logging

logger = setup_logging()

# Environment variables
REINGEST_KINESIS_STREAM_ARN = os.environ.get('REINGEST_KINESIS_STREAM_ARN', '')
REINGEST_DELIVERY_STREAM_ARN = os.environ.get('REINGEST_DELIVERY_STREAM_ARN', '')


def get_source_identifiers(event: FirehoseEvent) -> Tuple[str, str]:
    """
    Pick the (kinesis stream, delivery stream) identifier pair

    Explicitly configured ARNs win. Otherwise the Kinesis source ARN from the
    event is used when present, else the delivery stream ARN.
    """
    if REINGEST_KINESIS_STREAM_ARN or REINGEST_DELIVERY_STREAM_ARN:
        return REINGEST_KINESIS_STREAM_ARN, REINGEST_DELIVERY_STREAM_ARN

    if event.source_kinesis_stream_arn:
        return event.source_kinesis_stream_arn, ''
    return '', event.delivery_stream_arn or ''


def resolve_route(event: FirehoseEvent) -> Tuple[Optional[RouteInfo], Optional[SourceResolutionError]]:
    """Resolve the re-ingestion route without failing the batch"""
    kinesis_stream_arn, delivery_stream_arn = get_source_identifiers(event)
    try:
        return resolve_source(kinesis_stream_arn, delivery_stream_arn), None
    except SourceResolutionError as e:
        logger.warning(f"Unable to resolve re-ingestion target: {str(e)}")
        return None, e


def transform_event(event: Dict[str, Any], publish: bool = True, client=None) -> Dict[str, Any]:
    """
    Transform one Firehose event and republish overflowing records

    Args:
        event: Raw Lambda event
        publish: Republish re-ingestion batches when True
        client: Optional boto3 client used for republishing

    Returns:
        Firehose transformation response with one entry per input record

    Raises:
        pydantic.ValidationError: If the event is malformed
        SourceResolutionError: If records must be re-ingested but the target is unknown
        ReingestError: If republishing fails after all retries
    """
    firehose_event = FirehoseEvent.model_validate(event)
    records = firehose_event.to_raw_records()

    logger.info(f"Processing {len(records)} records for invocation {firehose_event.invocation_id}")

    route, route_error = resolve_route(firehose_event)
    is_stream = route.is_stream if route else False

    outcomes, candidates = process_records(records, is_stream, logger)
    plan = plan_reingestion(outcomes, candidates, log=logger)

    if plan.batches:
        if route is None:
            raise route_error
        if publish:
            publish_reingest_batches(route, plan.batches, client=client)
        else:
            logger.info(f"Dry run: skipping re-ingestion of {plan.reingested} records in {len(plan.batches)} batches")

    totals = Counter(outcome.result.value for outcome in plan.outcomes)
    logger.info(
        f"Processing complete. Ok: {totals['Ok']}, Dropped: {totals['Dropped']}, "
        f"ProcessingFailed: {totals['ProcessingFailed']}, Reingested: {plan.reingested}"
    )

    return {'records': [outcome.to_response() for outcome in plan.outcomes]}


def lambda_handler(event: Dict[str, Any], context) -> Dict[str, Any]:
    """
    AWS Lambda entry point for the Firehose data transformation
    """
    return transform_event(event)
