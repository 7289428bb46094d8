"""In-memory read representation linking signal events to basecalls"""

from dataclasses import dataclass, field

import numpy as np

from ..alignment import BaseRange, Event
from ..constants import STRAND_INDEX
from ..normalization import ScalingParameters, estimate_scaling
from .basecalls import BasecallRecord


class SignalDataError(ValueError):
    """Raised when a read's basecall and raw signal cannot be reconciled"""


@dataclass
class SquiggleRead:
    """
    Events, base ranges and level accessors for one read

    Only the template strand is populated; per-strand containers are indexed
    by strand so the reconciliation code stays strand-agnostic.

    Attributes:
        read_name: Read identifier
        sequence: Basecalled sequence in signal order
        events: Per-strand event lists
        base_ranges: Per-base tuples of BaseRange, indexed by strand
        scalings: Per-strand level scaling parameters
    """

    read_name: str
    sequence: str
    events: list[list[Event]]
    base_ranges: list[tuple[BaseRange, ...]]
    scalings: list[ScalingParameters] = field(default_factory=list)

    @classmethod
    def from_basecall(
        cls, basecall: BasecallRecord, signal: np.ndarray
    ) -> "SquiggleRead":
        """
        Segment the signal along the move table and derive base ranges

        Each move table entry is one event of ``stride`` samples starting at
        ``trimmed_samples``; the last event is clipped to the signal end.
        Base b owns the events from its move to the move of base b + 1.

        Args:
            basecall: Sequence and move table for the read
            signal: Calibrated raw signal (pA)

        Raises:
            SignalDataError: If the read has no move table, the move table
                disagrees with the sequence, or it runs past the signal
        """
        if not basecall.has_moves:
            raise SignalDataError(f"read {basecall.read_name} has no move table")

        stride = basecall.stride
        moves = basecall.moves
        if stride is None or stride <= 0:
            raise SignalDataError(
                f"read {basecall.read_name} has invalid stride {stride}"
            )

        base_starts = np.flatnonzero(moves == 1)
        if len(base_starts) != len(basecall.sequence):
            raise SignalDataError(
                f"read {basecall.read_name}: move table has {len(base_starts)} "
                f"base starts but sequence has {len(basecall.sequence)} bases"
            )

        num_samples = len(signal)
        starts = basecall.trimmed_samples + stride * np.arange(len(moves))
        if len(starts) > 0 and starts[-1] >= num_samples:
            raise SignalDataError(
                f"read {basecall.read_name}: move table spans "
                f"{starts[-1] + stride} samples but signal has {num_samples}"
            )
        ends = np.minimum(starts + stride, num_samples)

        events = []
        for i, (start, end) in enumerate(zip(starts, ends)):
            chunk = signal[start:end]
            events.append(
                Event(
                    index=i,
                    mean=float(np.mean(chunk)),
                    stdv=float(np.std(chunk)),
                    raw_start=int(start),
                    raw_length=int(end - start),
                )
            )

        stops = np.append(base_starts[1:] - 1, len(moves) - 1)
        base_ranges = [
            (BaseRange(int(start), int(stop)),)
            for start, stop in zip(base_starts, stops)
        ]

        return cls(
            read_name=basecall.read_name,
            sequence=basecall.sequence,
            events=[events],
            base_ranges=base_ranges,
            scalings=[estimate_scaling(signal)],
        )

    def get_event_sample_range(
        self, strand_idx: int, event_idx: int
    ) -> tuple[int, int]:
        """Raw sample span [start, end) of an event"""
        event = self.events[strand_idx][event_idx]
        return event.raw_start, event.raw_start + event.raw_length

    def get_unscaled_level(
        self, event_idx: int, strand_idx: int = STRAND_INDEX
    ) -> float:
        return self.events[strand_idx][event_idx].mean

    def get_fully_scaled_level(
        self, event_idx: int, strand_idx: int = STRAND_INDEX
    ) -> float:
        """Event mean normalized with the strand's scaling parameters"""
        level = self.events[strand_idx][event_idx].mean
        return self.scalings[strand_idx].apply(level)

    def get_stdv(self, event_idx: int, strand_idx: int = STRAND_INDEX) -> float:
        return self.events[strand_idx][event_idx].stdv

    @property
    def num_events(self) -> int:
        return len(self.events[STRAND_INDEX])

    def __repr__(self) -> str:
        return (
            f"<SquiggleRead: {self.read_name}, {len(self.sequence)} bases, "
            f"{self.num_events} events>"
        )
