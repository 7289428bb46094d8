"""Calibrated raw signal retrieval from POD5 archives"""

import threading
from pathlib import Path

import numpy as np
import pod5

from ..logging_config import get_logger
from .readdb import ReadDB

logger = get_logger(__name__)


class Pod5SignalLoader:
    """
    Fetch calibrated (pA) signal for reads listed in a ReadDB

    POD5 readers are opened lazily, one per archive per thread, and all of
    them are closed when the loader is closed.

    Examples:
        >>> with Pod5SignalLoader(ReadDB.load("calls.bam")) as loader:
        ...     signal = loader.get_signal("0f1e...")
    """

    def __init__(self, read_db: ReadDB):
        self.read_db = read_db
        self._local = threading.local()
        self._lock = threading.Lock()
        self._open_readers: list[pod5.Reader] = []

    def _get_reader(self, pod5_path: Path) -> pod5.Reader:
        readers = getattr(self._local, "readers", None)
        if readers is None:
            readers = self._local.readers = {}

        reader = readers.get(pod5_path)
        if reader is None:
            reader = pod5.Reader(pod5_path)
            readers[pod5_path] = reader
            with self._lock:
                self._open_readers.append(reader)
            logger.debug(f"Opened {pod5_path} in {threading.current_thread().name}")
        return reader

    def get_signal(self, read_id: str) -> np.ndarray:
        """
        Calibrated signal of a read in picoamps

        Raises:
            KeyError: If the read is not indexed or missing from its archive
        """
        pod5_path = self.read_db.get_pod5_path(read_id)
        reader = self._get_reader(pod5_path)
        reads = reader.reads(selection=[read_id], missing_ok=True)
        read = next(iter(reads), None)
        if read is None:
            raise KeyError(f"read {read_id} not found in {pod5_path}")
        return np.asarray(read.signal_pa, dtype=np.float64)

    def close(self) -> None:
        with self._lock:
            readers, self._open_readers = self._open_readers, []
        for reader in readers:
            reader.close()

    def __enter__(self) -> "Pod5SignalLoader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
