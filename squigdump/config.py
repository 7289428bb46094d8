"""Run configuration for event table export"""

import os
from dataclasses import dataclass
from pathlib import Path


class ConfigurationError(ValueError):
    """Raised when run options are invalid before any read is processed"""


@dataclass(frozen=True)
class DumpConfig:
    """Immutable options for one dump-initial-alignment run

    Attributes:
        reads_file: Basecalled reads (BAM with move tables)
        output_dir: Existing directory receiving one TSV per read
        threads: Number of worker threads (must be > 0)
        scale_events: Write scale-normalized event means instead of raw pA
        verbose: Verbosity count from the command line
    """

    reads_file: Path
    output_dir: Path = Path(".")
    threads: int = 1
    scale_events: bool = False
    verbose: int = 0

    @classmethod
    def from_args(cls, args) -> "DumpConfig":
        """Build a config from parsed argparse arguments"""
        return cls(
            reads_file=Path(args.reads),
            output_dir=Path(args.output_dir),
            threads=args.threads,
            scale_events=args.scale_events,
            verbose=args.verbose,
        )

    def validate(self) -> None:
        """Check options and filesystem preconditions

        Raises:
            ConfigurationError: If any option is invalid or a path is unusable
        """
        if self.threads <= 0:
            raise ConfigurationError(f"invalid number of threads: {self.threads}")

        if not self.reads_file.is_file():
            raise ConfigurationError(f"reads file does not exist: {self.reads_file}")
        if not os.access(self.reads_file, os.R_OK):
            raise ConfigurationError(f"could not open {self.reads_file} for read")

        # The output directory is never created here
        if not self.output_dir.is_dir():
            raise ConfigurationError(
                f"output directory does not exist: {self.output_dir}"
            )
        if not os.access(self.output_dir, os.W_OK | os.X_OK):
            raise ConfigurationError(
                f"output directory is not writable: {self.output_dir}"
            )
