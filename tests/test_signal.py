"""Tests for POD5 signal retrieval"""

import threading
from pathlib import Path
from unittest.mock import MagicMock

import numpy as np
import pod5
import pytest


@pytest.fixture
def opened_readers(monkeypatch):
    """Patch pod5.Reader with mocks serving float32 signal per read id"""
    readers = []

    def open_reader(path):
        reader = MagicMock(name=f"Reader({Path(path).name})")

        def reads(selection=None, missing_ok=False):
            return [
                MagicMock(signal_pa=np.full(4, 80.0 + len(read_id), dtype=np.float32))
                for read_id in selection
                if read_id.startswith("read_")
            ]

        reader.reads.side_effect = reads
        readers.append(reader)
        return reader

    monkeypatch.setattr(pod5, "Reader", open_reader)
    return readers


@pytest.fixture
def read_db(tmp_path):
    from squigdump.io.readdb import ReadDB

    return ReadDB(
        {
            "read_a": tmp_path / "a.pod5",
            "read_bb": tmp_path / "a.pod5",
            "gone": tmp_path / "b.pod5",
        }
    )


class TestPod5SignalLoader:
    """Tests for Pod5SignalLoader"""

    def test_get_signal(self, read_db, opened_readers):
        """Test signal is returned as float64 picoamps"""
        from squigdump.io.signal import Pod5SignalLoader

        with Pod5SignalLoader(read_db) as loader:
            signal = loader.get_signal("read_a")

        assert signal.dtype == np.float64
        np.testing.assert_array_equal(signal, np.full(4, 86.0))

    def test_reader_reused_within_thread(self, read_db, opened_readers):
        from squigdump.io.signal import Pod5SignalLoader

        with Pod5SignalLoader(read_db) as loader:
            loader.get_signal("read_a")
            loader.get_signal("read_bb")

        assert len(opened_readers) == 1

    def test_reader_per_thread(self, read_db, opened_readers):
        """Test each worker thread opens its own reader"""
        from squigdump.io.signal import Pod5SignalLoader

        with Pod5SignalLoader(read_db) as loader:
            loader.get_signal("read_a")
            worker = threading.Thread(target=loader.get_signal, args=("read_a",))
            worker.start()
            worker.join()

        assert len(opened_readers) == 2

    def test_close_closes_all_readers(self, read_db, opened_readers):
        from squigdump.io.signal import Pod5SignalLoader

        loader = Pod5SignalLoader(read_db)
        loader.get_signal("read_a")
        loader.close()

        opened_readers[0].close.assert_called_once()

    def test_unindexed_read_raises(self, read_db, opened_readers):
        from squigdump.io.signal import Pod5SignalLoader

        with Pod5SignalLoader(read_db) as loader:
            with pytest.raises(KeyError, match="not found in read index"):
                loader.get_signal("read_zzz")

    def test_read_missing_from_archive_raises(self, read_db, opened_readers):
        from squigdump.io.signal import Pod5SignalLoader

        with Pod5SignalLoader(read_db) as loader:
            with pytest.raises(KeyError, match="b.pod5"):
                loader.get_signal("gone")

    def test_generator_reads_finalized(self, read_db, monkeypatch):
        """Test a lazily yielded read is returned and its generator closed"""
        from squigdump.io.signal import Pod5SignalLoader

        finished = []

        def reads(selection=None, missing_ok=False):
            try:
                for read_id in selection:
                    yield MagicMock(signal_pa=np.arange(3, dtype=np.int16))
            finally:
                finished.append(selection)

        def open_reader(path):
            reader = MagicMock()
            reader.reads.side_effect = reads
            return reader

        monkeypatch.setattr(pod5, "Reader", open_reader)

        with Pod5SignalLoader(read_db) as loader:
            signal = loader.get_signal("read_a")

        np.testing.assert_array_equal(signal, [0.0, 1.0, 2.0])
        assert finished == [["read_a"]]

    def test_empty_generator_raises(self, read_db, monkeypatch):
        from squigdump.io.signal import Pod5SignalLoader

        def open_reader(path):
            reader = MagicMock()
            reader.reads.side_effect = lambda selection=None, missing_ok=False: iter(())
            return reader

        monkeypatch.setattr(pod5, "Reader", open_reader)

        with Pod5SignalLoader(read_db) as loader:
            with pytest.raises(KeyError, match="a.pod5"):
                loader.get_signal("read_a")
