"""Per-read export pipeline and worker pool"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from .alignment import reconcile_read
from .config import DumpConfig
from .export import event_table_path, write_event_table
from .io import BasecallRecord, Pod5SignalLoader, ReadDB, SquiggleRead, open_basecalls
from .logging_config import get_logger

logger = get_logger(__name__)

# Faults that abort a single read without stopping the batch
READ_FAULTS = (KeyError, ValueError, OSError)


@dataclass
class DumpSummary:
    """Outcome of a dump run"""

    processed: int = 0
    events_written: int = 0
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def __repr__(self) -> str:
        return (
            f"<DumpSummary: {self.processed} reads, {self.events_written} events, "
            f"{len(self.failed)} failed>"
        )


def process_read(basecall: BasecallRecord, signal_loader, config: DumpConfig) -> int:
    """
    Run Provider -> Inverter -> Enricher -> Emitter for one read

    Args:
        basecall: Basecalled read with its move table
        signal_loader: Object with ``get_signal(read_id) -> np.ndarray``
        config: Run configuration

    Returns:
        Number of event rows written
    """
    signal = signal_loader.get_signal(basecall.read_name)
    read = SquiggleRead.from_basecall(basecall, signal)
    records = reconcile_read(read, scale_events=config.scale_events)
    write_event_table(records, config.output_dir, read.read_name)
    return len(records)


def run_dump(config: DumpConfig, signal_loader=None) -> DumpSummary:
    """
    Export an event table for every read in the reads file

    Workers drain the shared basecall iterator under a lock and each
    processes its read to completion before taking the next. A read that
    fails is logged, its partial table removed, and the batch continues.
    Any other exception stops all workers from taking further reads and
    propagates to the caller.

    Args:
        config: Validated run configuration
        signal_loader: Signal source; defaults to a Pod5SignalLoader over
            the reads file's ReadDB

    Returns:
        DumpSummary with per-read failures

    Raises:
        ConfigurationError: If the configuration is invalid
        FileNotFoundError: If the read index is missing
    """
    config.validate()

    owns_loader = signal_loader is None
    if owns_loader:
        signal_loader = Pod5SignalLoader(ReadDB.load(config.reads_file))

    summary = DumpSummary()
    summary_lock = threading.Lock()

    try:
        with open_basecalls(config.reads_file) as basecalls:
            cursor_lock = threading.Lock()
            abort = threading.Event()

            def next_basecall() -> BasecallRecord | None:
                with cursor_lock:
                    if abort.is_set():
                        return None
                    return next(basecalls, None)

            def drain() -> None:
                while True:
                    basecall = next_basecall()
                    if basecall is None:
                        return
                    read_name = basecall.read_name
                    try:
                        num_events = process_read(basecall, signal_loader, config)
                    except READ_FAULTS as e:
                        logger.error(f"Failed to process read {read_name}: {e}")
                        event_table_path(config.output_dir, read_name).unlink(
                            missing_ok=True
                        )
                        with summary_lock:
                            summary.failed.append((read_name, str(e)))
                        continue

                    logger.debug(f"Processed {read_name}: {num_events} events")
                    with summary_lock:
                        summary.processed += 1
                        summary.events_written += num_events

            def worker() -> None:
                # Any fault outside READ_FAULTS stops every worker
                try:
                    drain()
                except BaseException:
                    abort.set()
                    raise

            if config.threads == 1:
                worker()
            else:
                with ThreadPoolExecutor(
                    max_workers=config.threads, thread_name_prefix="squigdump"
                ) as executor:
                    futures = [executor.submit(worker) for _ in range(config.threads)]
                    for future in as_completed(futures):
                        future.result()
    finally:
        if owns_loader:
            signal_loader.close()

    logger.info(
        f"Exported {summary.processed} reads ({summary.events_written} events), "
        f"{len(summary.failed)} failed"
    )
    return summary
