from __future__ import annotations

from pathlib import Path

import pytest

from arabica.index import (
    ArchiveScanError,
    ClassIndex,
    class_name_from_entry,
    index_archive,
    iter_class_names,
)


def test_class_entry_names_map_to_dotted_names() -> None:
    assert class_name_from_entry("a/b/C.class") == "a.b.C"
    assert class_name_from_entry("Top.class") == "Top"
    assert class_name_from_entry("META-INF/MANIFEST.MF") is None
    assert class_name_from_entry("a/b/C.java") is None


def test_index_archive_adds_only_class_entries(tmp_path: Path, make_jar) -> None:
    jar = make_jar(
        tmp_path / "lib.jar",
        [
            "META-INF/",
            "META-INF/MANIFEST.MF",
            "a/",
            "a/b/C.class",
            "a/b/C$Inner.class",
            "a/b/readme.txt",
            "Top.class",
        ],
    )
    index = ClassIndex()

    added = index_archive(index, jar)

    assert added == 3
    assert index.lookup("C") == ("a.b.C",)
    assert index.lookup("C$Inner") == ("a.b.C$Inner",)
    assert index.lookup("Top") == ("Top",)
    assert index.lookup("MANIFEST") == ()


def test_indexing_same_archive_twice_is_idempotent(tmp_path: Path, make_jar) -> None:
    jar = make_jar(tmp_path / "lib.jar", ["com/x/Foo.class", "com/y/Foo.class"])
    index = ClassIndex()

    assert index_archive(index, jar) == 2
    first = index.to_payload()
    assert index_archive(index, jar) == 0

    assert index.to_payload() == first
    assert index.lookup("Foo") == ("com.x.Foo", "com.y.Foo")


def test_custom_class_suffix(tmp_path: Path, make_jar) -> None:
    jar = make_jar(tmp_path / "lib.jar", ["k/Thing.kotlin_module", "k/Other.class"])

    assert list(iter_class_names(jar, class_suffix=".kotlin_module")) == ["k.Thing"]


def test_missing_archive_raises_scan_error(tmp_path: Path) -> None:
    missing = tmp_path / "missing.jar"

    with pytest.raises(ArchiveScanError) as info:
        index_archive(ClassIndex(), missing)

    assert info.value.path == str(missing)
    assert "No such file" in info.value.message


def test_corrupt_archive_raises_scan_error(tmp_path: Path) -> None:
    corrupt = tmp_path / "corrupt.jar"
    corrupt.write_bytes(b"definitely not a zip file")
    index = ClassIndex()

    with pytest.raises(ArchiveScanError):
        index_archive(index, corrupt)
    assert len(index) == 0


def test_bare_class_suffix_entry_is_indexed_under_empty_name(tmp_path: Path, make_jar) -> None:
    jar = make_jar(tmp_path / "odd.jar", [".class", "p/A.class"])
    index = ClassIndex()

    assert index_archive(index, jar) == 2
    assert index.lookup("") == ("",)
    assert index.lookup("A") == ("p.A",)
