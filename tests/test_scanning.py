import pytest

from raw_cleaner.exceptions import DirectoryScanError, SidecarReadError
from raw_cleaner.models import CollisionStrategy, SidecarMetadata
from raw_cleaner.scanning.filesystem import list_directory
from raw_cleaner.scanning.grouper import PhotoGrouper, group, prefix_of
from conftest import make_xmp


class StubReader:
    """Serves sidecar metadata from a dict, failing for names it doesn't know."""
    def __init__(self, metadata):
        self.metadata = metadata
        self.reads = []

    def read(self, filename):
        self.reads.append(filename)
        if filename not in self.metadata:
            raise SidecarReadError(filename, "Permission denied")
        return self.metadata[filename]


@pytest.mark.parametrize(
    "name,expected",
    [
        ("DSC001.ARW", "DSC001"),
        ("DSC001.ARW.xmp", "DSC001"),
        ("DSC001.insta.jpg", "DSC001"),
        ("noext", "noext"),
    ],
)
def test_prefix_of(name, expected):
    assert prefix_of(name) == expected


def test_list_directory_returns_files_only(tmp_path):
    (tmp_path / "b.ARW").write_bytes(b"x")
    (tmp_path / "A.jpg").write_bytes(b"x")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.ARW").write_bytes(b"x")

    assert list_directory(tmp_path) == ["A.jpg", "b.ARW"]


def test_list_directory_missing_dir(tmp_path):
    with pytest.raises(DirectoryScanError):
        list_directory(tmp_path / "nope")


def test_files_without_raw_are_ignored(photo_dir, reader):
    photo_dir(["DSC001.jpg", "DSC001.ARW.xmp", "DSC002.ARW", "notes.txt"])

    records = group(["DSC001.jpg", "DSC001.ARW.xmp", "DSC002.ARW", "notes.txt"], sidecar_reader=reader)

    assert list(records) == ["DSC002"]
    assert records["DSC002"].raw_filename == "DSC002.ARW"
    assert records["DSC002"].sidecar_filename is None


def test_companion_classification(reader):
    names = ["DSC001.ARW", "DSC001.ARW.xmp", "DSC001.JPG", "DSC001.insta.jpg", "DSC001.txt"]
    stub = StubReader({"DSC001.ARW.xmp": SidecarMetadata(rating=2, modification_count=7)})

    rec = PhotoGrouper(stub).group(names)["DSC001"]

    assert rec.raw_filename == "DSC001.ARW"
    assert rec.sidecar_filename == "DSC001.ARW.xmp"
    assert rec.preview_filename == "DSC001.JPG"
    assert rec.export_filename == "DSC001.insta.jpg"
    assert rec.rating == 2
    assert rec.modification_count == 7


def test_export_is_never_preview():
    rec = PhotoGrouper(StubReader({})).group(["DSC001.ARW", "DSC001.Export.JPG"])["DSC001"]

    assert rec.export_filename == "DSC001.Export.JPG"
    assert rec.preview_filename is None


def test_preview_prefix_is_case_sensitive():
    records = PhotoGrouper(StubReader({})).group(["DSC001.ARW", "dsc001.jpg"])

    assert records["DSC001"].preview_filename is None


def test_jpg_sidecar_is_taken_as_raw_sidecar():
    stub = StubReader({"DSC001.JPG.xmp": SidecarMetadata(rating=5)})

    rec = PhotoGrouper(stub).group(["DSC001.ARW", "DSC001.JPG.xmp"])["DSC001"]

    assert rec.sidecar_filename == "DSC001.JPG.xmp"
    assert rec.rating == 5


@pytest.mark.parametrize("ext", ["CR3", "cr3", ".CR3"])
def test_raw_extension_is_configurable(ext):
    names = ["IMG_1.CR3", "IMG_2.ARW"]

    records = PhotoGrouper(StubReader({})).group(names, raw_extension=ext)

    assert list(records) == ["IMG_1"]


def test_raw_extension_match_is_case_insensitive():
    records = PhotoGrouper(StubReader({})).group(["DSC001.arw", "DSC002.Arw"])

    assert sorted(records) == ["DSC001", "DSC002"]


def test_collision_last_wins_by_default():
    names = ["DSC001.ARW", "DSC001.arw", "DSC001.a.jpg", "DSC001.b.jpg", "DSC001.JPG", "DSC001.jpg"]

    rec = PhotoGrouper(StubReader({})).group(names)["DSC001"]

    assert rec.raw_filename == "DSC001.arw"
    assert rec.export_filename == "DSC001.b.jpg"
    assert rec.preview_filename == "DSC001.jpg"


def test_collision_first_wins():
    names = ["DSC001.ARW", "DSC001.arw", "DSC001.a.jpg", "DSC001.b.jpg", "DSC001.JPG", "DSC001.jpg"]

    grouper = PhotoGrouper(StubReader({}), collision=CollisionStrategy.FIRST_WINS)
    rec = grouper.group(names)["DSC001"]

    assert rec.raw_filename == "DSC001.ARW"
    assert rec.export_filename == "DSC001.a.jpg"
    assert rec.preview_filename == "DSC001.JPG"


def test_only_winning_sidecar_is_read():
    stub = StubReader({
        "DSC001.ARW.xmp": SidecarMetadata(rating=1),
        "DSC001.JPG.xmp": SidecarMetadata(rating=4),
    })

    rec = PhotoGrouper(stub).group(["DSC001.ARW", "DSC001.ARW.xmp", "DSC001.JPG.xmp"])["DSC001"]

    assert stub.reads == ["DSC001.JPG.xmp"]
    assert rec.rating == 4


@pytest.mark.parametrize("workers", [1, 4])
def test_sidecar_failure_does_not_affect_other_records(workers):
    stub = StubReader({"DSC002.ARW.xmp": SidecarMetadata(rating=3, modification_count=11)})
    names = ["DSC001.ARW", "DSC001.ARW.xmp", "DSC002.ARW", "DSC002.ARW.xmp"]

    records = PhotoGrouper(stub, max_workers=workers).group(names)

    broken = records["DSC001"]
    assert broken.rating == 0
    assert broken.modification_count == 0
    assert len(broken.warnings) == 1
    assert "Permission denied" in broken.warnings[0]

    assert records["DSC002"].rating == 3
    assert records["DSC002"].modification_count == 11
    assert records["DSC002"].warnings == []


def test_reads_real_sidecars_in_parallel(photo_dir, reader):
    names = []
    sidecars = {}
    for i in range(20):
        names += [f"DSC{i:03d}.ARW", f"DSC{i:03d}.ARW.xmp"]
        sidecars[f"DSC{i:03d}.ARW.xmp"] = make_xmp(rating=i % 6 - 1, edits=i)
    photo_dir(names, sidecars)

    records = PhotoGrouper(reader, max_workers=4).group(names)

    for i in range(20):
        rec = records[f"DSC{i:03d}"]
        assert rec.rating == i % 6 - 1
        assert rec.modification_count == i


def test_no_sidecar_means_zero_metadata():
    rec = PhotoGrouper(StubReader({})).group(["DSC001.ARW", "DSC001.jpg"])["DSC001"]

    assert rec.rating == 0
    assert rec.modification_count == 0
    assert rec.warnings == []


def test_list_directory_includes_symlinked_files(tmp_path):
    store = tmp_path / "store"
    store.mkdir()
    (store / "meta.xmp").write_text("x")
    (store / "preview.jpg").write_bytes(b"x")
    shoot = tmp_path / "shoot"
    shoot.mkdir()
    (shoot / "DSC001.ARW").write_bytes(b"x")
    (shoot / "DSC001.ARW.xmp").symlink_to(store / "meta.xmp")
    (shoot / "DSC001.jpg").symlink_to(store / "preview.jpg")
    (shoot / "linked_dir").symlink_to(store, target_is_directory=True)

    assert list_directory(shoot) == ["DSC001.ARW", "DSC001.ARW.xmp", "DSC001.jpg"]
