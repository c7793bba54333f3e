import os
import logging
from pathlib import Path
from typing import List, Union

from ..exceptions import DirectoryScanError


def list_directory(directory: Union[str, Path]) -> List[str]:
    """
    Returns the names of regular files directly inside directory.

    Symlinks to files are included; sub-directories are not descended into.
    Names are sorted case-insensitively so that "last one wins" collisions
    are stable between runs.
    """
    root = Path(directory)
    try:
        with os.scandir(root) as it:
            entries = list(it)
    except OSError as e:
        raise DirectoryScanError(f"Cannot list {root}: {e.strerror or e}") from e

    names = []
    for e in entries:
        try:
            if e.is_file():
                names.append(e.name)
        except OSError:
            logging.warning(f"Cannot stat {e.path}, skipping")

    names.sort(key=lambda n: (n.lower(), n))
    logging.debug(f"Listed {len(names)} files in {root}")
    return names
