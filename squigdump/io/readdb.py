"""Read identifier to POD5 archive lookup"""

from collections.abc import Iterable
from pathlib import Path

import pod5

from ..constants import POD5_GLOB, READDB_SUFFIX
from ..logging_config import get_logger

logger = get_logger(__name__)


def readdb_path(reads_file: str | Path) -> Path:
    """Location of the index that accompanies a reads file"""
    reads_file = Path(reads_file)
    return reads_file.with_name(reads_file.name + READDB_SUFFIX)


def find_pod5_files(paths: Iterable[str | Path]) -> list[Path]:
    """Expand files and directories into a sorted list of POD5 files

    Raises:
        FileNotFoundError: If a path does not exist
    """
    found = set()
    for path in paths:
        path = Path(path)
        if path.is_dir():
            found.update(path.rglob(POD5_GLOB))
        elif path.is_file():
            found.add(path)
        else:
            raise FileNotFoundError(f"POD5 path not found: {path}")
    return sorted(found)


class ReadDB:
    """
    Map of read IDs to the POD5 file holding their raw signal

    The index is stored next to the reads file as ``<reads>.index.readdb``,
    one ``read_id<TAB>pod5_path`` line per read.

    Examples:
        >>> db = ReadDB.build(["run1/"])
        >>> db.save("calls.bam")
        >>> db = ReadDB.load("calls.bam")
        >>> db.get_pod5_path("0f1e...")
        PosixPath('run1/batch0.pod5')
    """

    def __init__(self, locations: dict[str, Path] | None = None):
        self._locations: dict[str, Path] = dict(locations or {})

    @classmethod
    def load(cls, reads_file: str | Path) -> "ReadDB":
        """
        Load the index built for a reads file

        Relative archive paths are resolved against the index directory.

        Raises:
            FileNotFoundError: If the index has not been built
            ValueError: If a line is not ``read_id<TAB>path``
        """
        index_path = readdb_path(reads_file)
        if not index_path.exists():
            raise FileNotFoundError(
                f"read index not found: {index_path} "
                f"(run 'squigdump index' on {reads_file} first)"
            )

        locations = {}
        with open(index_path) as f:
            for line_no, line in enumerate(f, start=1):
                line = line.rstrip("\n")
                if not line:
                    continue
                fields = line.split("\t")
                if len(fields) != 2:
                    raise ValueError(
                        f"{index_path}:{line_no}: expected 2 fields, got {len(fields)}"
                    )
                read_id, location = fields
                location = Path(location)
                if not location.is_absolute():
                    location = index_path.parent / location
                locations[read_id] = location

        logger.info(f"Loaded {len(locations)} reads from {index_path}")
        return cls(locations)

    @classmethod
    def build(cls, pod5_paths: Iterable[str | Path]) -> "ReadDB":
        """Scan POD5 files (or directories of them) for read IDs"""
        locations = {}
        for pod5_file in find_pod5_files(pod5_paths):
            with pod5.Reader(pod5_file) as reader:
                for read in reader.reads():
                    locations[str(read.read_id)] = pod5_file
            logger.debug(f"Indexed {pod5_file}")
        return cls(locations)

    def save(self, reads_file: str | Path) -> Path:
        """Write the index next to reads_file, sorted by read ID"""
        index_path = readdb_path(reads_file)
        with open(index_path, "w") as f:
            for read_id in sorted(self._locations):
                f.write(f"{read_id}\t{self._locations[read_id]}\n")
        return index_path

    def get_pod5_path(self, read_id: str) -> Path:
        """
        Archive holding read_id

        Raises:
            KeyError: If the read is not indexed
        """
        try:
            return self._locations[read_id]
        except KeyError:
            raise KeyError(f"read {read_id} not found in read index") from None

    def has_read(self, read_id: str) -> bool:
        return read_id in self._locations

    def read_ids(self) -> list[str]:
        return sorted(self._locations)

    def __contains__(self, read_id: str) -> bool:
        return self.has_read(read_id)

    def __len__(self) -> int:
        return len(self._locations)

    def __repr__(self) -> str:
        return f"<ReadDB: {len(self._locations):,} reads indexed>"
