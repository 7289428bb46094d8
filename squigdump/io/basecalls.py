"""Basecalled read iteration from BAM files"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pysam

from ..constants import MOVE_TABLE_TAG, TRIMMED_SAMPLES_TAG


@dataclass(frozen=True)
class BasecallRecord:
    """Basecall of one read, detached from the pysam file handle

    Attributes:
        read_name: Read identifier (POD5 read ID)
        sequence: Basecalled sequence in signal order
        stride: Signal samples per move table entry
        moves: Move table without the stride (1 = a new base starts)
        trimmed_samples: Samples skipped before the first move
    """

    read_name: str
    sequence: str
    stride: int | None = None
    moves: np.ndarray | None = None
    trimmed_samples: int = 0

    @property
    def has_moves(self) -> bool:
        return self.moves is not None


def parse_basecall(alignment) -> BasecallRecord:
    """Convert a pysam AlignedSegment into a BasecallRecord

    Aligned reverse-strand records store the reverse complement; the forward
    sequence is recovered so it lines up with the signal.
    """
    sequence = alignment.get_forward_sequence() or ""

    stride = None
    moves = None
    if alignment.has_tag(MOVE_TABLE_TAG):
        move_table = np.array(alignment.get_tag(MOVE_TABLE_TAG), dtype=np.uint8)
        if len(move_table) > 0:
            # Stride represents the neural network downsampling factor
            stride = int(move_table[0])
            moves = move_table[1:]

    trimmed_samples = 0
    if alignment.has_tag(TRIMMED_SAMPLES_TAG):
        trimmed_samples = int(alignment.get_tag(TRIMMED_SAMPLES_TAG))

    return BasecallRecord(
        read_name=alignment.query_name,
        sequence=sequence,
        stride=stride,
        moves=moves,
        trimmed_samples=trimmed_samples,
    )


@contextmanager
def open_basecalls(reads_file: str | Path):
    """
    Context manager yielding an iterator of primary BasecallRecords

    Secondary and supplementary alignments repeat a read already seen and
    are skipped.

    Raises:
        FileNotFoundError: If the reads file doesn't exist

    Examples:
        >>> with open_basecalls("calls.bam") as records:
        ...     for record in records:
        ...         print(record.read_name, len(record.sequence))
    """
    reads_file = Path(reads_file)
    if not reads_file.exists():
        raise FileNotFoundError(f"Reads file not found: {reads_file}")

    bam = pysam.AlignmentFile(str(reads_file), check_sq=False)
    try:
        yield _iter_primary(bam)
    finally:
        bam.close()


def _iter_primary(bam) -> Iterator[BasecallRecord]:
    for alignment in bam.fetch(until_eof=True):
        if alignment.is_secondary or alignment.is_supplementary:
            continue
        yield parse_basecall(alignment)
