"""
Re-ingestion batcher: keep the response under the Lambda payload limit

Lambda responses are capped at 6,291,456 bytes. The projected size counts the
record id, result tag and payload of every Ok outcome; protocol overhead is not
counted, so the ceiling is kept at 6,000,000 bytes. Once the cumulative size
crosses the ceiling every later Ok outcome is demoted to Dropped and its
original bytes are queued for republishing, in input order.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from firehose_processor.models.records import (
    Ok, Outcome, ReingestBatch, ReingestCandidate, demote
)

logger = logging.getLogger(__name__)

MAX_PAYLOAD_SIZE = 6000000
MAX_REINGEST_BATCH_SIZE = 500


@dataclass
class ReingestPlan:
    """Final outcomes plus the batches that must be republished"""
    outcomes: List[Outcome]
    batches: List[ReingestBatch] = field(default_factory=list)
    reingested: int = 0


def projected_size(outcome: Ok) -> int:
    """Bytes an Ok outcome contributes to the response estimate"""
    return len(outcome.record_id.encode('utf-8')) + len(outcome.result.value) + len(outcome.data)


def plan_reingestion(
    outcomes: Sequence[Outcome],
    candidates: Sequence[ReingestCandidate],
    max_payload_size: int = MAX_PAYLOAD_SIZE,
    max_batch_size: int = MAX_REINGEST_BATCH_SIZE,
    log: Optional[logging.Logger] = None
) -> ReingestPlan:
    """
    Demote overflowing Ok outcomes and group their originals into batches

    Args:
        outcomes: Classified outcomes in input order
        candidates: Re-ingestion candidates parallel to outcomes
        max_payload_size: Cumulative size ceiling in bytes
        max_batch_size: Maximum candidates per republish batch

    Returns:
        ReingestPlan with outcomes of the same length and order as the input

    Raises:
        ValueError: If outcomes and candidates are not parallel
    """
    log = log or logger

    if len(outcomes) != len(candidates):
        raise ValueError(f"Expected one reingest candidate per outcome, got {len(candidates)} for {len(outcomes)} outcomes")
    if max_batch_size < 1:
        raise ValueError(f"max_batch_size must be positive, got {max_batch_size}")

    plan = ReingestPlan(outcomes=[])
    current_batch = ReingestBatch()
    total_size = 0

    for outcome, candidate in zip(outcomes, candidates):
        if not isinstance(outcome, Ok):
            plan.outcomes.append(outcome)
            continue

        total_size += projected_size(outcome)
        if total_size <= max_payload_size:
            plan.outcomes.append(outcome)
            continue

        plan.outcomes.append(demote(outcome))
        current_batch.append(candidate)
        plan.reingested += 1

        if len(current_batch) == max_batch_size:
            plan.batches.append(current_batch)
            current_batch = ReingestBatch()

    if len(current_batch) > 0:
        plan.batches.append(current_batch)

    if plan.reingested:
        log.warning(
            f"Projected response size {total_size} bytes exceeds {max_payload_size}; "
            f"re-ingesting {plan.reingested} records in {len(plan.batches)} batches"
        )

    return plan
