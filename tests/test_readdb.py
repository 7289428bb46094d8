"""Tests for the read ID -> POD5 index"""

from pathlib import Path
from unittest.mock import MagicMock

import pod5
import pytest


def fake_pod5_reader(contents):
    """Factory standing in for pod5.Reader over {path name: [read ids]}"""

    def open_reader(path):
        reader = MagicMock()
        reader.__enter__.return_value = reader
        reader.__exit__.return_value = False
        reader.reads.return_value = [
            MagicMock(read_id=read_id) for read_id in contents[Path(path).name]
        ]
        return reader

    return open_reader


class TestReadDBPersistence:
    """Tests for saving and loading the index"""

    def test_save_and_load(self, tmp_path):
        from squigdump.io.readdb import ReadDB

        reads_file = tmp_path / "calls.bam"
        db = ReadDB({"read_b": tmp_path / "b.pod5", "read_a": tmp_path / "a.pod5"})
        index_path = db.save(reads_file)

        assert index_path == tmp_path / "calls.bam.index.readdb"
        assert index_path.read_text().splitlines()[0].startswith("read_a\t")

        loaded = ReadDB.load(reads_file)
        assert len(loaded) == 2
        assert loaded.get_pod5_path("read_b") == tmp_path / "b.pod5"

    def test_relative_paths_resolved_against_index(self, tmp_path):
        from squigdump.io.readdb import ReadDB

        (tmp_path / "calls.bam.index.readdb").write_text("read_a\tpod5/a.pod5\n\n")

        db = ReadDB.load(tmp_path / "calls.bam")

        assert db.get_pod5_path("read_a") == tmp_path / "pod5" / "a.pod5"

    def test_missing_index_raises(self, tmp_path):
        from squigdump.io.readdb import ReadDB

        with pytest.raises(FileNotFoundError, match="squigdump index"):
            ReadDB.load(tmp_path / "calls.bam")

    def test_malformed_line_raises(self, tmp_path):
        from squigdump.io.readdb import ReadDB

        (tmp_path / "calls.bam.index.readdb").write_text("read_a\n")

        with pytest.raises(ValueError, match=":1: expected 2 fields"):
            ReadDB.load(tmp_path / "calls.bam")


class TestReadDBLookup:
    """Tests for lookups"""

    def test_unknown_read_raises_key_error(self):
        from squigdump.io.readdb import ReadDB

        db = ReadDB({"read_a": Path("a.pod5")})

        with pytest.raises(KeyError, match="read_z"):
            db.get_pod5_path("read_z")

    def test_membership(self):
        from squigdump.io.readdb import ReadDB

        db = ReadDB({"read_a": Path("a.pod5")})

        assert "read_a" in db
        assert db.has_read("read_b") is False
        assert db.read_ids() == ["read_a"]
        assert repr(db) == "<ReadDB: 1 reads indexed>"


class TestReadDBBuild:
    """Tests for building the index from POD5 files"""

    def test_build_from_directory(self, tmp_path, monkeypatch):
        from squigdump.io.readdb import ReadDB

        (tmp_path / "run").mkdir()
        (tmp_path / "run" / "a.pod5").touch()
        (tmp_path / "run" / "b.pod5").touch()
        (tmp_path / "run" / "notes.txt").touch()
        monkeypatch.setattr(
            pod5,
            "Reader",
            fake_pod5_reader({"a.pod5": ["r1", "r2"], "b.pod5": ["r3"]}),
        )

        db = ReadDB.build([tmp_path / "run"])

        assert len(db) == 3
        assert db.get_pod5_path("r3") == tmp_path / "run" / "b.pod5"

    def test_find_pod5_files_missing_path(self, tmp_path):
        from squigdump.io.readdb import find_pod5_files

        with pytest.raises(FileNotFoundError, match="POD5 path not found"):
            find_pod5_files([tmp_path / "nope"])

    def test_find_pod5_files_dedupes(self, tmp_path):
        from squigdump.io.readdb import find_pod5_files

        pod5_file = tmp_path / "a.pod5"
        pod5_file.touch()

        assert find_pod5_files([tmp_path, pod5_file]) == [pod5_file]
