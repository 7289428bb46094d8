"""Command-line interface for squigdump"""

import argparse
import sys
from pathlib import Path

from rich.console import Console

from . import __version__
from .config import ConfigurationError, DumpConfig
from .constants import APP_DESCRIPTION, APP_NAME
from .io import ReadDB, open_basecalls, readdb_path
from .logging_config import set_log_level
from .pipeline import run_dump

# Rich console for styled output (stderr keeps stdout free for piping)
console = Console(stderr=True)

DUMP_SUBPROGRAM = "dump-initial-alignment"
INDEX_SUBPROGRAM = "index"


def positive_int(value: str) -> int:
    """argparse type for --threads"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"invalid number of threads: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Create the top-level parser with its subcommands"""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=f"{APP_NAME} - {APP_DESCRIPTION}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {APP_NAME} index --reads calls.bam --pod5 pod5_dir/
  {APP_NAME} {DUMP_SUBPROGRAM} --reads calls.bam --output-dir events/ --threads 8

Version: {__version__}
        """,
    )
    parser.add_argument(
        "--version", action="version", version=f"{APP_NAME} {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    dump = subparsers.add_parser(
        DUMP_SUBPROGRAM,
        help="write the event-to-basecall alignment of each read",
        description="Write one TSV per read reconciling signal events with bases",
    )
    dump.add_argument(
        "-r",
        "--reads",
        type=str,
        required=True,
        help="basecalled reads (BAM with move tables)",
    )
    dump.add_argument(
        "-t",
        "--threads",
        type=positive_int,
        default=1,
        help="use NUM threads (default: 1)",
    )
    dump.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=".",
        help="existing output directory (default: current directory)",
    )
    dump.add_argument(
        "-s",
        "--scale-events",
        action="store_true",
        help="write scale-normalized event means",
    )
    dump.add_argument(
        "-v", "--verbose", action="count", default=0, help="display verbose output"
    )
    dump.add_argument(
        "--version", action="version", version=f"{DUMP_SUBPROGRAM} {__version__}"
    )
    dump.set_defaults(func=dump_initial_alignment)

    index = subparsers.add_parser(
        INDEX_SUBPROGRAM,
        help="map read IDs to the POD5 files holding their signal",
        description="Build <reads>.index.readdb from POD5 files",
    )
    index.add_argument(
        "-r", "--reads", type=str, required=True, help="basecalled reads (BAM)"
    )
    index.add_argument(
        "-p",
        "--pod5",
        type=str,
        nargs="+",
        required=True,
        help="POD5 files or directories containing them",
    )
    index.add_argument(
        "-v", "--verbose", action="count", default=0, help="display verbose output"
    )
    index.set_defaults(func=build_index)

    return parser


def dump_initial_alignment(args) -> int:
    """Run the event table export

    Args:
        args: Parsed command-line arguments from argparse

    Returns:
        Exit code: 0 for success, 1 for error
    """
    config = DumpConfig.from_args(args)
    set_log_level(config.verbose)
    try:
        summary = run_dump(config)
    except (ConfigurationError, OSError, ValueError) as e:
        console.print(f"[red]{DUMP_SUBPROGRAM}:[/red] {e}")
        return 1

    console.print(
        f"[green]✓[/green] Wrote {summary.processed} event tables "
        f"({summary.events_written:,} events) to {config.output_dir}"
    )
    if not summary.ok:
        console.print(f"[red]Error:[/red] {len(summary.failed)} read(s) failed:")
        for read_name, message in summary.failed:
            console.print(f"  - {read_name}: {message}")
        return 1
    return 0


def build_index(args) -> int:
    """Index POD5 archives for a reads file

    Returns:
        Exit code: 0 for success, 1 for error
    """
    set_log_level(args.verbose)
    reads_file = Path(args.reads)
    try:
        console.print(f"[cyan]Indexing POD5 files for:[/cyan] {reads_file}")
        read_db = ReadDB.build(args.pod5)

        with open_basecalls(reads_file) as basecalls:
            missing = [
                record.read_name
                for record in basecalls
                if not read_db.has_read(record.read_name)
            ]
        read_db.save(reads_file)
    except (FileNotFoundError, OSError, ValueError) as e:
        console.print(f"[red]{INDEX_SUBPROGRAM}:[/red] {e}")
        return 1

    if missing:
        examples = ", ".join(missing[:5])
        console.print(
            f"[yellow]Warning:[/yellow] {len(missing)} basecalled read(s) have no "
            f"signal in the POD5 files (e.g. {examples})"
        )
    console.print(
        f"[green]✓[/green] Indexed {len(read_db):,} reads "
        f"to {readdb_path(reads_file)}"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the squigdump command"""
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
