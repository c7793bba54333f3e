from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from . import config


class Verdict(str, Enum):
    KEEP = "KEEP"
    DELETE = "DELETE"


class Reason(str, Enum):
    NO_PREVIEW = "NO_PREVIEW"
    RATING_THRESHOLD = "RATING_THRESHOLD"
    HAS_EXPORT = "HAS_EXPORT"
    EDIT_THRESHOLD = "EDIT_THRESHOLD"
    POLICY_DELETE = "POLICY_DELETE"


class CollisionStrategy(str, Enum):
    """Which file wins when two names land in the same slot of a record."""
    LAST_WINS = "last"
    FIRST_WINS = "first"


@dataclass
class PhotoRecord:
    """
    All files sharing one name prefix, anchored on the raw file.
    """
    prefix: str               # DSC001
    raw_filename: str         # DSC001.ARW
    sidecar_filename: Optional[str] = None   # DSC001.ARW.xmp
    export_filename: Optional[str] = None    # DSC001.*.jpg
    preview_filename: Optional[str] = None   # DSC001.jpg

    # Populated from the sidecar, 0 when there is none
    rating: int = 0
    modification_count: int = 0

    # Non-fatal problems hit while building the record
    warnings: List[str] = field(default_factory=list)

    @property
    def is_rejected(self) -> bool:
        return self.rating < 0


@dataclass(frozen=True)
class RetentionConfig:
    """
    Resolved retention policy. Built once by the caller and passed in.

    max_edits_before_force_delete=None means no edit count is high enough
    to keep a photo on its own.
    """
    min_rating_to_keep: int = config.DEFAULT_MIN_RATING
    max_edits_before_force_delete: Optional[int] = None
    require_preview: bool = True
    raw_extension: str = config.DEFAULT_RAW_EXT


@dataclass(frozen=True)
class DecisionOutcome:
    verdict: Verdict
    reason: Reason
    also_discard_preview: bool = False

    @property
    def is_delete(self) -> bool:
        return self.verdict is Verdict.DELETE


@dataclass(frozen=True)
class SidecarMetadata:
    rating: int = 0
    modification_count: int = 0


@dataclass
class PhotoDecision:
    """A record, what the policy decided for it, and the files it implicates."""
    record: PhotoRecord
    outcome: DecisionOutcome
    targets: List[str] = field(default_factory=list)


@dataclass
class DiscardResult:
    """
    Outcome of a discard pass.

    Attributes:
        success_paths: Files sent to the trash (or that would be, on a dry run).
        failed: Tuples of (path, reason) for failures.
        dry_run: True when nothing was actually touched.
    """
    success_paths: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed
