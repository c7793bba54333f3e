import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from send2trash import send2trash

from . import config
from .metadata.extract import SidecarReader
from .models import CollisionStrategy, DiscardResult, PhotoDecision, RetentionConfig
from .organization.discarder import FileDiscarder
from .policy.evaluator import decide
from .reporting import ReportGenerator, log_decisions
from .scanning.filesystem import list_directory
from .scanning.grouper import PhotoGrouper


@dataclass
class RunSummary:
    decisions: List[PhotoDecision] = field(default_factory=list)
    discard_result: DiscardResult = field(default_factory=DiscardResult)

    @property
    def kept(self) -> int:
        return sum(1 for d in self.decisions if not d.outcome.is_delete)

    @property
    def deleted(self) -> int:
        return sum(1 for d in self.decisions if d.outcome.is_delete)


class RawCleanerApp:
    def __init__(self,
                 trash: Callable[[str], None] = send2trash,
                 max_workers: int = config.DEFAULT_MAX_WORKERS,
                 collision: CollisionStrategy = CollisionStrategy.LAST_WINS):
        self.trash = trash
        self.max_workers = max_workers
        self.collision = collision

    def run(self,
            directory: Path,
            retention: RetentionConfig,
            delete: bool = False,
            report_csv: Optional[Path] = None) -> RunSummary:
        """
        Executes the cleaning pipeline for one directory.
        1. List files
        2. Group into photos (reads sidecars)
        3. Decide keep/delete
        4. Report
        5. Discard (or only log, unless delete=True)
        """
        logging.info(f"Examining {directory} (ext={retention.raw_extension}, "
                     f"min rating={retention.min_rating_to_keep}, "
                     f"max edits={retention.max_edits_before_force_delete}, "
                     f"require jpg={retention.require_preview})")

        # --- Step 1: Listing ---
        filenames = list_directory(directory)

        # --- Step 2: Grouping ---
        grouper = PhotoGrouper(
            sidecar_reader=SidecarReader(directory),
            max_workers=self.max_workers,
            collision=self.collision,
        )
        records = grouper.group(filenames, retention.raw_extension)

        # --- Step 3: Deciding ---
        decisions = decide(records.values(), retention)
        log_decisions(decisions, dry_run=not delete)

        # --- Step 4: Reporting ---
        if report_csv:
            ReportGenerator().write_csv(decisions, report_csv)

        # --- Step 5: Discarding ---
        discarder = FileDiscarder(directory, trash=self.trash)
        result = discarder.execute(decisions, dry_run=not delete)

        summary = RunSummary(decisions=decisions, discard_result=result)
        logging.info(f"Done. {summary.kept} kept, {summary.deleted} "
                     f"{'deleted' if delete else 'would be deleted'}.")
        return summary
