"""
I/O layer for squigdump

- readdb: read ID -> POD5 archive index
- basecalls: basecalled reads and move tables from BAM
- signal: calibrated signal retrieval from POD5
- squiggle: per-read events and base ranges
"""

from .basecalls import BasecallRecord, open_basecalls, parse_basecall
from .readdb import ReadDB, find_pod5_files, readdb_path
from .signal import Pod5SignalLoader
from .squiggle import SignalDataError, SquiggleRead

__all__ = [
    "BasecallRecord",
    "Pod5SignalLoader",
    "ReadDB",
    "SignalDataError",
    "SquiggleRead",
    "find_pod5_files",
    "open_basecalls",
    "parse_basecall",
    "readdb_path",
]
