"""Pytest configuration and shared fixtures."""

import array

import numpy as np
import pysam
import pytest


class FakeSignalLoader:
    """In-memory stand-in for Pod5SignalLoader"""

    def __init__(self, signals):
        self.signals = dict(signals)
        self.closed = False

    def get_signal(self, read_id):
        if read_id not in self.signals:
            raise KeyError(f"read {read_id} not found in read index")
        return self.signals[read_id]

    def close(self):
        self.closed = True


def make_signal(num_samples, seed=0):
    """Deterministic pA-like signal"""
    rng = np.random.default_rng(seed)
    return rng.normal(90.0, 12.0, size=num_samples)


def write_bam(path, records):
    """Write unaligned basecall records to a BAM file

    Each record is a dict with ``name``, ``sequence``, and optionally
    ``stride``/``moves`` (written as the mv tag), ``ts`` and ``flag``.
    """
    header = {"HD": {"VN": "1.6", "SO": "unknown"}}
    with pysam.AlignmentFile(str(path), "wb", header=header) as bam:
        for record in records:
            segment = pysam.AlignedSegment()
            segment.query_name = record["name"]
            segment.query_sequence = record["sequence"]
            segment.flag = record.get("flag", 4)
            segment.reference_id = -1
            segment.reference_start = -1
            segment.mapping_quality = 0
            segment.query_qualities = pysam.qualitystring_to_array(
                "I" * len(record["sequence"])
            )
            if "moves" in record:
                segment.set_tag(
                    "mv", array.array("b", [record["stride"]] + list(record["moves"]))
                )
            if "ts" in record:
                segment.set_tag("ts", record["ts"])
            bam.write(segment)
    return path


@pytest.fixture
def basecall_records():
    """Three reads with move tables; read_b has stays and a trimmed start"""
    return [
        {
            "name": "read_a",
            "sequence": "ACGTACGTAC",
            "stride": 5,
            "moves": [1, 0, 1, 1, 0, 0, 1, 1, 1, 0, 1, 1, 1, 1],
        },
        {
            "name": "read_b",
            "sequence": "GGCATT",
            "stride": 4,
            "moves": [1, 0, 0, 1, 1, 0, 1, 1, 0, 1],
            "ts": 7,
        },
        {
            "name": "read_c",
            "sequence": "TTAG",
            "stride": 6,
            "moves": [1, 1, 0, 1, 1],
        },
    ]


@pytest.fixture
def basecall_signals():
    return {
        "read_a": make_signal(80, seed=1),
        "read_b": make_signal(7 + 40 + 3, seed=2),
        "read_c": make_signal(28, seed=3),
    }


@pytest.fixture
def reads_bam(tmp_path, basecall_records):
    """BAM of basecall_records, with an (empty) read index alongside"""
    bam_path = write_bam(tmp_path / "calls.bam", basecall_records)
    (tmp_path / "calls.bam.index.readdb").write_text(
        "".join(f"{r['name']}\tsignal.pod5\n" for r in basecall_records)
    )
    return bam_path


@pytest.fixture
def signal_loader(basecall_signals):
    return FakeSignalLoader(basecall_signals)


@pytest.fixture
def output_dir(tmp_path):
    path = tmp_path / "events"
    path.mkdir()
    return path


@pytest.fixture
def bam_writer():
    """Return the write_bam helper"""
    return write_bam


@pytest.fixture
def loader_factory():
    """Return the FakeSignalLoader class"""
    return FakeSignalLoader
