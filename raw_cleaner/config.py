"""
Configuration constants for the raw cleaner.
"""
import re

# --- File Type Definitions ---
DEFAULT_RAW_EXT = 'ARW'
SIDECAR_EXT = '.xmp'
PREVIEW_EXT = '.jpg'

# Exports look like DSC001.export.jpg or DSC001.insta.jpg (matched lower-cased)
EXPORT_PATTERN = re.compile(r'^.+\..+\.jpg$')

# --- Sidecar Parsing ---
# Darktable writes the rating as an attribute; -1 marks a rejected photo
RATING_PATTERN = re.compile(r'xmp:Rating="([-+]?\d+)"')
# Each history entry is an <rdf:li> element
HISTORY_MARKER_PATTERN = re.compile(r'<rdf:li')
SIDECAR_ENCODING = 'utf-8'

# --- Retention Defaults ---
# 1 keeps everything that was rated at all, 5 keeps only perfect shots
DEFAULT_MIN_RATING = 1
MAX_RATING = 5

# --- Performance ---
# Sidecars are tiny, so a small pool is plenty
DEFAULT_MAX_WORKERS = 4


def normalize_raw_extension(ext: str) -> str:
    """'ARW', '.arw' and 'arw' all become '.arw'."""
    ext = ext.strip().lower()
    if not ext.startswith('.'):
        ext = '.' + ext
    return ext
