import logging
from pathlib import Path
from typing import Callable, Iterable, Union

from send2trash import send2trash
from tqdm import tqdm

from ..exceptions import DiscardError
from ..models import DiscardResult, PhotoDecision


class FileDiscarder:
    """
    Sends the targets of DELETE decisions to the trash.

    `trash` is any callable taking a path and raising OSError on failure.
    A failure on one file is recorded and the remaining files are still
    attempted.
    """

    def __init__(self, directory: Union[str, Path], trash: Callable[[str], None] = send2trash):
        self.directory = Path(directory)
        self.trash = trash

    def execute(self, decisions: Iterable[PhotoDecision], dry_run: bool = True) -> DiscardResult:
        targets = [t for d in decisions for t in d.targets]
        result = DiscardResult(dry_run=dry_run)

        if not targets:
            logging.info("Nothing to discard.")
            return result

        logging.info(f"Discarding {len(targets)} files (DryRun={dry_run})...")

        if dry_run:
            for name in targets:
                logging.debug(f"[DRY RUN] {name}: would trash")
                result.success_paths.append(name)
            return result

        for name in tqdm(targets, desc="Discarding"):
            try:
                self.discard(name)
                result.success_paths.append(name)
            except DiscardError as e:
                logging.error(str(e))
                result.failed.append((name, e.reason))

        logging.info(f"Discarded {len(result.success_paths)} files, {len(result.failed)} failed.")
        return result

    def discard(self, filename: str):
        """Trashes a single file, raising DiscardError if that fails."""
        path = self.directory / filename
        if not path.exists():
            raise DiscardError(filename, "File does not exist")

        logging.debug(f"{filename}: trashing")
        try:
            self.trash(str(path))
        except OSError as e:
            raise DiscardError(filename, str(e)) from e
