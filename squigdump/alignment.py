"""Event-to-base reconciliation for signal-level alignment export

The basecaller attributes a contiguous range of signal events to each base.
This module inverts that per-base table into a per-event base assignment,
fills the gaps left by bases without signal, and enriches every event with
its statistics and raw-sample span.
"""

from dataclasses import dataclass

import numpy as np

from .constants import KMER_SIZE, STRAND_INDEX, UNASSIGNED, UNKNOWN_KMER


class MalformedBaseRangeError(ValueError):
    """Raised when a base range cannot describe a valid event interval"""


@dataclass(frozen=True)
class Event:
    """One segment of raw signal summarized as a single observation"""

    index: int  # Ordinal within its strand (0-based, dense)
    mean: float  # Unscaled mean level (pA)
    stdv: float  # Standard deviation of the level (pA)
    raw_start: int  # First raw sample of the event
    raw_length: int  # Number of raw samples in the event


@dataclass(frozen=True)
class BaseRange:
    """Inclusive event interval attributed to one base on one strand

    ``start == -1`` marks a base with no aligned events.
    """

    start: int
    stop: int

    @classmethod
    def unaligned(cls) -> "BaseRange":
        return cls(UNASSIGNED, UNASSIGNED)

    @property
    def is_aligned(self) -> bool:
        return self.start != UNASSIGNED


@dataclass(frozen=True)
class EventRecord:
    """One exported row of the event table"""

    event_index: int
    base_index: int
    strand_index: int
    event_mean: float
    event_stdv: float
    raw_start: float
    raw_length: float
    kmer: str


def invert_base_ranges(
    base_ranges: list[tuple[BaseRange, ...]],
    num_events: int,
    strand_idx: int = STRAND_INDEX,
) -> np.ndarray:
    """Build a dense event -> base index map from per-base event ranges

    Bases are walked in increasing order and each claims every event of its
    range, so where ranges overlap the higher base index wins.

    Args:
        base_ranges: Per-base tuples of BaseRange, indexed by strand
        num_events: Number of events on the strand
        strand_idx: Strand to invert

    Returns:
        int64 array of length num_events holding a base index or -1

    Raises:
        MalformedBaseRangeError: If a range is reversed or outside the events

    Examples:
        >>> ranges = [(BaseRange(0, 1),), (BaseRange.unaligned(),), (BaseRange(2, 2),)]
        >>> invert_base_ranges(ranges, 4)
        array([ 0,  0,  2, -1])
    """
    event_to_base = np.full(num_events, UNASSIGNED, dtype=np.int64)

    for base_idx, strand_ranges in enumerate(base_ranges):
        base_range = strand_ranges[strand_idx]
        if not base_range.is_aligned:
            continue

        start, stop = base_range.start, base_range.stop
        if start < 0 or stop < start:
            raise MalformedBaseRangeError(
                f"base {base_idx} has malformed event range [{start}, {stop}]"
            )
        if stop >= num_events:
            raise MalformedBaseRangeError(
                f"base {base_idx} event range [{start}, {stop}] exceeds "
                f"{num_events} events"
            )

        event_to_base[start : stop + 1] = base_idx

    return event_to_base


def extract_kmer(sequence: str, base_idx: int, k: int = KMER_SIZE) -> str:
    """Return the k-mer starting at base_idx

    Near the end of the sequence the result is shorter than k (empty past
    the end); this is expected at read boundaries.
    """
    return sequence[base_idx : base_idx + k]


def annotate_events(
    read,
    event_to_base: np.ndarray,
    scale_events: bool = False,
    strand_idx: int = STRAND_INDEX,
) -> list[EventRecord]:
    """Resolve a base and k-mer for every event and gather its statistics

    Events with no base of their own are stays: they inherit the most
    recently assigned base and get the unknown k-mer. Events before the
    first assigned base are attributed to base 0.

    Args:
        read: Read data provider (see squigdump.io.squiggle.SquiggleRead)
        event_to_base: Map produced by invert_base_ranges
        scale_events: Report scale-normalized means instead of raw levels
        strand_idx: Strand being exported

    Returns:
        One EventRecord per event, in event order
    """
    records = []
    prev_base = 0

    for i in range(len(event_to_base)):
        raw_start, raw_end = read.get_event_sample_range(strand_idx, i)

        base_idx = int(event_to_base[i])
        if base_idx >= 0:
            prev_base = base_idx
            kmer = extract_kmer(read.sequence, base_idx)
        else:
            base_idx = prev_base
            kmer = UNKNOWN_KMER

        if scale_events:
            event_mean = read.get_fully_scaled_level(i, strand_idx)
        else:
            event_mean = read.get_unscaled_level(i, strand_idx)

        records.append(
            EventRecord(
                event_index=i,
                base_index=base_idx,
                strand_index=strand_idx,
                event_mean=float(event_mean),
                event_stdv=float(read.get_stdv(i, strand_idx)),
                raw_start=float(raw_start),
                raw_length=float(raw_end - raw_start),
                kmer=kmer,
            )
        )

    return records


def reconcile_read(
    read, scale_events: bool = False, strand_idx: int = STRAND_INDEX
) -> list[EventRecord]:
    """Invert the read's base ranges and annotate all of its events"""
    event_to_base = invert_base_ranges(
        read.base_ranges, len(read.events[strand_idx]), strand_idx
    )
    return annotate_events(read, event_to_base, scale_events, strand_idx)
