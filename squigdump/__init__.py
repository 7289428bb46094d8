"""
squigdump: export event-to-basecall alignments for nanopore reads

For every basecalled read, the raw signal is segmented along the basecaller's
move table and each signal event is written with the base it belongs to,
its k-mer context, level statistics and raw-sample span.

Example usage:
    >>> from squigdump import DumpConfig, run_dump
    >>> summary = run_dump(DumpConfig(reads_file=Path("calls.bam"),
    ...                               output_dir=Path("events")))

    $ squigdump index --reads calls.bam --pod5 pod5_dir/
    $ squigdump dump-initial-alignment --reads calls.bam -o events/ -t 8
"""

__version__ = "0.1.0"

from .alignment import (
    BaseRange,
    Event,
    EventRecord,
    MalformedBaseRangeError,
    annotate_events,
    extract_kmer,
    invert_base_ranges,
    reconcile_read,
)
from .config import ConfigurationError, DumpConfig
from .export import event_table_path, format_event_record, write_event_table
from .io import (
    BasecallRecord,
    Pod5SignalLoader,
    ReadDB,
    SignalDataError,
    SquiggleRead,
    open_basecalls,
)
from .normalization import ScalingParameters, estimate_scaling
from .pipeline import DumpSummary, process_read, run_dump

__all__ = [
    "__version__",
    # Reconciliation
    "BaseRange",
    "Event",
    "EventRecord",
    "MalformedBaseRangeError",
    "annotate_events",
    "extract_kmer",
    "invert_base_ranges",
    "reconcile_read",
    # Configuration
    "ConfigurationError",
    "DumpConfig",
    # Export
    "event_table_path",
    "format_event_record",
    "write_event_table",
    # I/O
    "BasecallRecord",
    "Pod5SignalLoader",
    "ReadDB",
    "SignalDataError",
    "SquiggleRead",
    "open_basecalls",
    # Scaling
    "ScalingParameters",
    "estimate_scaling",
    # Pipeline
    "DumpSummary",
    "process_read",
    "run_dump",
]
