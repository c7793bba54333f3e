"""
Retention policy.

Everything here is pure: records and a RetentionConfig go in, decisions come
out. Nothing is logged and nothing touches the disk.
"""
from typing import Iterable, List

from ..models import (
    DecisionOutcome,
    PhotoDecision,
    PhotoRecord,
    Reason,
    RetentionConfig,
    Verdict,
)


def evaluate(record: PhotoRecord, retention: RetentionConfig) -> DecisionOutcome:
    """
    Decides whether the raw file of a photo may go.

    Rules are checked in order and the first match wins:
      1. No preview JPG (unless previews are not required) -> keep.
      2. Rating at or above the threshold -> keep.
      3. An export exists -> keep.
      4. Edit count at or above the threshold -> keep.
      5. Delete. A negative rating takes the preview with it.
    """
    if retention.require_preview and not record.preview_filename:
        return DecisionOutcome(Verdict.KEEP, Reason.NO_PREVIEW)

    if record.rating >= retention.min_rating_to_keep:
        return DecisionOutcome(Verdict.KEEP, Reason.RATING_THRESHOLD)

    if record.export_filename:
        return DecisionOutcome(Verdict.KEEP, Reason.HAS_EXPORT)

    max_edits = retention.max_edits_before_force_delete
    if max_edits is not None and record.modification_count >= max_edits:
        return DecisionOutcome(Verdict.KEEP, Reason.EDIT_THRESHOLD)

    return DecisionOutcome(
        Verdict.DELETE,
        Reason.POLICY_DELETE,
        also_discard_preview=record.is_rejected,
    )


def discard_targets(record: PhotoRecord, outcome: DecisionOutcome) -> List[str]:
    """Filenames a decision implicates, raw file first."""
    if not outcome.is_delete:
        return []

    targets = [record.raw_filename]
    if record.sidecar_filename:
        targets.append(record.sidecar_filename)
    if outcome.also_discard_preview and record.preview_filename:
        targets.append(record.preview_filename)
    return targets


def decide(records: Iterable[PhotoRecord], retention: RetentionConfig) -> List[PhotoDecision]:
    """Evaluates every record, in prefix order."""
    decisions = []
    for record in sorted(records, key=lambda r: r.prefix):
        outcome = evaluate(record, retention)
        decisions.append(PhotoDecision(record, outcome, discard_targets(record, outcome)))
    return decisions
