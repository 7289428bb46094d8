"""
Export functions for per-read event tables

Each read is written to ``<output_dir>/<read_name>.tsv`` with a single header
line followed by one tab-separated row per event.
"""

from collections.abc import Iterable
from pathlib import Path

from .alignment import EventRecord
from .constants import EVENT_TABLE_COLUMNS, EVENT_TABLE_SUFFIX, FLOAT_PRECISION
from .logging_config import get_logger

logger = get_logger(__name__)


def event_table_path(output_dir: str | Path, read_name: str) -> Path:
    """Destination of the event table for one read"""
    return Path(output_dir) / f"{read_name}{EVENT_TABLE_SUFFIX}"


def format_event_record(record: EventRecord) -> str:
    """Render one event table row (without trailing newline)

    Examples:
        >>> format_event_record(EventRecord(0, 1, 0, 80.5, 2.0, 10.0, 5.0, "ACGTAC"))
        '0\\t1\\t0\\t80.500000\\t2.000000\\t10.000000\\t5.000000\\tACGTAC'
    """
    p = FLOAT_PRECISION
    return (
        f"{record.event_index}\t{record.base_index}\t{record.strand_index}\t"
        f"{record.event_mean:.{p}f}\t{record.event_stdv:.{p}f}\t"
        f"{record.raw_start:.{p}f}\t{record.raw_length:.{p}f}\t{record.kmer}"
    )


def write_event_table(
    records: Iterable[EventRecord], output_dir: str | Path, read_name: str
) -> Path:
    """
    Write the event table for one read, replacing any previous file

    Args:
        records: Event records in increasing event order
        output_dir: Existing destination directory
        read_name: Read identifier used as the file stem

    Returns:
        Path of the written file

    Raises:
        OSError: If the file cannot be written. The partial file is removed
            before the error propagates.
    """
    output_path = event_table_path(output_dir, read_name)

    try:
        with open(output_path, "w") as f:
            f.write("\t".join(EVENT_TABLE_COLUMNS) + "\n")
            for record in records:
                f.write(format_event_record(record) + "\n")
    except BaseException:
        output_path.unlink(missing_ok=True)
        raise

    logger.debug(f"Wrote event table: {output_path}")
    return output_path
