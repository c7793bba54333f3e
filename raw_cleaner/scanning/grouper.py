import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from .. import config
from ..exceptions import SidecarReadError
from ..metadata.extract import SidecarReader
from ..models import CollisionStrategy, PhotoRecord, SidecarMetadata


def prefix_of(filename: str) -> str:
    """DSC001.ARW.xmp -> DSC001 (text before the first dot, case kept)."""
    return filename.split('.')[0]


def extension_of(filename: str) -> str:
    return Path(filename).suffix.lower()


class PhotoGrouper:
    """
    Groups loose files into one PhotoRecord per raw file.

    Pass 1 collects raw files, pass 2 attaches sidecar, export and preview
    files to them, pass 3 reads the attached sidecars. Files whose prefix has
    no raw file are ignored.
    """

    def __init__(self,
                 sidecar_reader: Optional[SidecarReader] = None,
                 max_workers: int = config.DEFAULT_MAX_WORKERS,
                 collision: CollisionStrategy = CollisionStrategy.LAST_WINS):
        self.sidecar_reader = sidecar_reader or SidecarReader(Path.cwd())
        self.max_workers = max_workers
        self.collision = collision

    def group(self, filenames: Sequence[str], raw_extension: str = config.DEFAULT_RAW_EXT) -> Dict[str, PhotoRecord]:
        raw_ext = config.normalize_raw_extension(raw_extension)
        records = self._collect_raw_files(filenames, raw_ext)
        self._attach_companions(filenames, raw_ext, records)
        self._load_sidecars(records)
        logging.info(f"Grouped {len(records)} photos from {len(filenames)} files")
        return records

    # --- Pass 1 ---

    def _collect_raw_files(self, filenames: Iterable[str], raw_ext: str) -> Dict[str, PhotoRecord]:
        records: Dict[str, PhotoRecord] = {}
        for name in filenames:
            if extension_of(name) != raw_ext:
                continue
            prefix = prefix_of(name)
            existing = records.get(prefix)
            if existing is not None:
                logging.debug(f"{prefix}: raw collision {existing.raw_filename} / {name}")
                if self.collision is CollisionStrategy.FIRST_WINS:
                    continue
            records[prefix] = PhotoRecord(prefix=prefix, raw_filename=name)
        return records

    # --- Pass 2 ---

    def _attach_companions(self, filenames: Iterable[str], raw_ext: str, records: Dict[str, PhotoRecord]):
        for name in filenames:
            if extension_of(name) == raw_ext:
                continue

            prefix = prefix_of(name)
            record = records.get(prefix)
            if record is None:
                continue

            normalized = name.lower()
            if config.EXPORT_PATTERN.match(normalized):
                self._assign(record, 'export_filename', name)
            elif extension_of(normalized) == config.SIDECAR_EXT:
                # Extension only: DSC001.JPG.xmp is taken just like DSC001.ARW.xmp
                self._assign(record, 'sidecar_filename', name)
            elif normalized == prefix.lower() + config.PREVIEW_EXT:
                self._assign(record, 'preview_filename', name)

    def _assign(self, record: PhotoRecord, slot: str, name: str):
        current = getattr(record, slot)
        if current is not None:
            logging.debug(f"{record.prefix}: {slot} collision {current} / {name}")
            if self.collision is CollisionStrategy.FIRST_WINS:
                return
        setattr(record, slot, name)

    # --- Pass 3 ---

    def _load_sidecars(self, records: Dict[str, PhotoRecord]):
        pending = [r for r in records.values() if r.sidecar_filename]
        if not pending:
            return

        if self.max_workers <= 1:
            for record in pending:
                self._apply_sidecar(record, self._read_one(record))
            return

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_record = {
                executor.submit(self._read_one, record): record
                for record in pending
            }
            for future in as_completed(future_to_record):
                self._apply_sidecar(future_to_record[future], future.result())

    def _read_one(self, record: PhotoRecord) -> Optional[SidecarMetadata]:
        """Reads one sidecar; failures become a warning on the record."""
        try:
            return self.sidecar_reader.read(record.sidecar_filename)
        except SidecarReadError as e:
            logging.warning(f"{record.raw_filename}: {e}; treating as unrated")
            record.warnings.append(str(e))
            return None

    def _apply_sidecar(self, record: PhotoRecord, meta: Optional[SidecarMetadata]):
        if meta is None:
            return
        record.rating = meta.rating
        record.modification_count = meta.modification_count


def group(filenames: Sequence[str],
          raw_extension: str = config.DEFAULT_RAW_EXT,
          sidecar_reader: Optional[SidecarReader] = None) -> Dict[str, PhotoRecord]:
    """Convenience wrapper around PhotoGrouper with default settings."""
    return PhotoGrouper(sidecar_reader).group(filenames, raw_extension)
