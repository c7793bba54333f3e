import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import config
from .core import RawCleanerApp
from .exceptions import RawCleanerError
from .models import CollisionStrategy, RetentionConfig


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, optionally, a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(
        description="Raw Cleaner: trash raw files that were never rated, exported or edited"
    )

    p.add_argument("--dir", type=Path, default=None, help="Directory to examine (default: current directory)")
    p.add_argument("--rating", type=int, default=config.DEFAULT_MIN_RATING,
                   help="Minimal rating to keep a photo. 1 keeps everything rated, 5 keeps only perfect shots")
    p.add_argument("--max-edits", type=int, default=0,
                   help="Photos with at least this many edits are kept (0: no limit)")
    p.add_argument("--ext", default=config.DEFAULT_RAW_EXT, help="Raw file extension")
    p.add_argument("--ignore-jpg", action="store_true",
                   help="Do not keep raw files just because they have no matching JPG")
    p.add_argument("--delete", action="store_true", help="Send files to the trash instead of only logging them")
    p.add_argument("--workers", type=int, default=config.DEFAULT_MAX_WORKERS,
                   help="Parallel sidecar readers (1 = sequential)")
    p.add_argument("--collision", choices=[s.value for s in CollisionStrategy],
                   default=CollisionStrategy.LAST_WINS.value,
                   help="Which file wins when several match the same slot of a photo")
    p.add_argument("--report-csv", type=Path, default=None, help="Write a CSV decision report to this path")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = p.parse_args(argv)
    if args.rating < 0:
        p.error("--rating must be 0 or greater")
    if args.max_edits < 0:
        p.error("--max-edits must be 0 or greater")
    return args


def build_retention(args) -> RetentionConfig:
    return RetentionConfig(
        min_rating_to_keep=args.rating,
        max_edits_before_force_delete=args.max_edits or None,
        require_preview=not args.ignore_jpg,
        raw_extension=args.ext,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    directory = (args.dir or Path.cwd()).resolve()
    retention = build_retention(args)

    logging.info("=== Raw Cleaner Started ===")
    if not args.delete:
        logging.info("Dry run: pass --delete to actually trash files")

    app = RawCleanerApp(max_workers=args.workers, collision=CollisionStrategy(args.collision))

    try:
        summary = app.run(directory, retention, delete=args.delete, report_csv=args.report_csv)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1
    except RawCleanerError as e:
        logging.error(str(e))
        return 1
    except Exception:
        logging.exception("Fatal error while cleaning.")
        return 1

    if not summary.discard_result.ok:
        logging.error(f"{len(summary.discard_result.failed)} files could not be discarded.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
