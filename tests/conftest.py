import pytest
from pathlib import Path

from raw_cleaner.metadata.extract import SidecarReader


def make_xmp(rating=None, edits=0) -> str:
    """Builds a minimal Darktable-style sidecar."""
    rating_attr = f'\n    xmp:Rating="{rating}"' if rating is not None else ""
    history = "\n".join(
        f'      <rdf:li darktable:num="{i}" darktable:operation="exposure" darktable:enabled="1"/>'
        for i in range(edits)
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<x:xmpmeta xmlns:x="adobe:ns:meta/" x:xmptk="XMP Core 4.4.0-Exiv2">
 <rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">
  <rdf:Description rdf:about=""
    xmlns:xmp="http://ns.adobe.com/xap/1.0/"
    xmlns:darktable="http://darktable.sf.net/"{rating_attr}
    darktable:history_end="{edits}">
   <darktable:history>
    <rdf:Seq>
{history}
    </rdf:Seq>
   </darktable:history>
  </rdf:Description>
 </rdf:RDF>
</x:xmpmeta>
"""


@pytest.fixture
def photo_dir(tmp_path):
    """
    Returns a helper that populates tmp_path.
    Names ending in .xmp get sidecar content from the `sidecars` mapping.
    """
    def _populate(names, sidecars=None) -> Path:
        sidecars = sidecars or {}
        for name in names:
            p = tmp_path / name
            if name.lower().endswith(".xmp"):
                p.write_text(sidecars.get(name, make_xmp()), encoding="utf-8")
            else:
                p.write_bytes(b"data")
        return tmp_path
    return _populate


@pytest.fixture
def reader(tmp_path):
    return SidecarReader(tmp_path)


@pytest.fixture
def fake_trash():
    """A trash callable that records paths and deletes them."""
    calls = []

    def _trash(path):
        calls.append(Path(path).name)
        Path(path).unlink()

    _trash.calls = calls
    return _trash
