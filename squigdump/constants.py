"""Constants and configuration for squigdump"""

# ==============================================================================
# Application Metadata
# ==============================================================================

APP_NAME = "squigdump"
APP_DESCRIPTION = "Export per-event signal/basecall alignments for nanopore reads"

# ==============================================================================
# Event Table Settings
# ==============================================================================

KMER_SIZE = 6  # Sequence context length written for each event
UNKNOWN_BASE = "N"
UNKNOWN_KMER = UNKNOWN_BASE * KMER_SIZE  # Placeholder for events with no base

# Only the template strand is exported
STRAND_INDEX = 0

# Unaligned sentinel used in base ranges and event-to-base maps
UNASSIGNED = -1

EVENT_TABLE_COLUMNS = (
    "event_index",
    "base_index",
    "strand_index",
    "event_mean",
    "event_stdv",
    "raw_start",
    "raw_length",
    "kmer",
)
EVENT_TABLE_SUFFIX = ".tsv"
FLOAT_PRECISION = 6

# ==============================================================================
# File I/O Settings
# ==============================================================================

READDB_SUFFIX = ".index.readdb"
POD5_GLOB = "*.pod5"

# BAM tags written by the basecaller
MOVE_TABLE_TAG = "mv"  # [stride, move_0, move_1, ...]
TRIMMED_SAMPLES_TAG = "ts"  # Samples trimmed from the start of the signal

# ==============================================================================
# Scaling Settings
# ==============================================================================

MAD_TO_STD = 1.4826  # Makes MAD consistent with std for normal data

# ==============================================================================
# Logging
# ==============================================================================

LOG_LEVEL_ENV_VAR = "SQUIGDUMP_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
