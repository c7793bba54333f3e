import logging
from pathlib import Path
from typing import Union

from .. import config
from ..exceptions import SidecarReadError
from ..models import SidecarMetadata


def extract_rating(content: str) -> int:
    """
    Returns the value of the first xmp:Rating="N" attribute, or 0.

    Plain text search, so it does not care what XML surrounds the attribute.
    """
    match = config.RATING_PATTERN.search(content)
    if not match:
        return 0
    return int(match.group(1))


def extract_modification_count(content: str) -> int:
    """Counts history entries (<rdf:li markers) in the sidecar text."""
    return len(config.HISTORY_MARKER_PATTERN.findall(content))


class SidecarReader:
    """
    Reads Darktable sidecars from one directory.

    Each read opens the file, pulls out the text and closes it again before
    any parsing happens.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def read_text(self, filename: str) -> str:
        path = self.directory / filename
        try:
            with path.open('r', encoding=config.SIDECAR_ENCODING, errors='replace') as f:
                return f.read()
        except OSError as e:
            raise SidecarReadError(filename, e.strerror or str(e)) from e

    def read(self, filename: str) -> SidecarMetadata:
        content = self.read_text(filename)
        meta = SidecarMetadata(
            rating=extract_rating(content),
            modification_count=extract_modification_count(content),
        )
        logging.debug(f"{filename}: rating={meta.rating} edits={meta.modification_count}")
        return meta
