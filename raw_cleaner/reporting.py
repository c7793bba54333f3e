import csv
import logging
from pathlib import Path
from typing import Iterable, List, Union

from . import config
from .models import PhotoDecision, Reason


def describe_rating(rating: int) -> str:
    if rating < 0:
        return "MARKED AS REJECT"
    return f"RATING {rating}/{config.MAX_RATING}"


def format_decision(decision: PhotoDecision, dry_run: bool = True) -> str:
    """One console line per photo, e.g. 'DSC001.ARW: KEEP: HAS 15 EDITS'."""
    record = decision.record
    reason = decision.outcome.reason
    name = record.raw_filename

    if reason is Reason.NO_PREVIEW:
        return f"{name}: KEEP: NO MATCH JPG"
    if reason is Reason.RATING_THRESHOLD:
        return f"{name}: KEEP: {describe_rating(record.rating)}"
    if reason is Reason.HAS_EXPORT:
        return f"{name}: KEEP: HAS EXPORT {record.export_filename}"
    if reason is Reason.EDIT_THRESHOLD:
        return f"{name}: KEEP: HAS {record.modification_count} EDITS"

    verb = "WOULD DELETE" if dry_run else "DELETE"
    line = f"{name}: {verb}, {describe_rating(record.rating)}"
    if record.warnings:
        line += f" (WARNING: {'; '.join(record.warnings)})"
    return line


def log_decisions(decisions: Iterable[PhotoDecision], dry_run: bool = True):
    for decision in decisions:
        logging.info(format_decision(decision, dry_run))


class ReportGenerator:
    HEADERS = [
        "Prefix",
        "Raw File",
        "Sidecar",
        "Preview",
        "Export",
        "Rating",
        "Edits",
        "Verdict",
        "Reason",
        "Discard Preview",
        "Targets",
        "Warnings",
    ]

    def write_csv(self, decisions: Iterable[PhotoDecision], output_csv: Union[str, Path]) -> int:
        """
        Writes one row per photo. Returns the number of rows written.
        """
        logging.info(f"Writing decision report -> {output_csv}")
        count = 0
        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(self.HEADERS)
            for decision in decisions:
                writer.writerow(self._row(decision))
                count += 1

        logging.info(f"Report complete. {count} photos.")
        return count

    def _row(self, decision: PhotoDecision) -> List:
        record = decision.record
        outcome = decision.outcome
        return [
            record.prefix,
            record.raw_filename,
            record.sidecar_filename or "",
            record.preview_filename or "",
            record.export_filename or "",
            record.rating,
            record.modification_count,
            outcome.verdict.value,
            outcome.reason.value,
            int(outcome.also_discard_preview),
            ";".join(decision.targets),
            "; ".join(record.warnings),
        ]
