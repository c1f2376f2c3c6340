"""Command line interface: ``python -m tsmatrix <command>``.

Commands:
    resample  Read ``timestamp,value`` rows from a CSV file and print the
              dense series on a uniform grid, with empty cells where the
              input has no sample.
    describe  Machine-readable API schema (JSON to stdout).
    version   Print the tsmatrix version.
"""

from __future__ import annotations

import argparse
import json
import sys

import pandas as pd

from tsmatrix.core.errors import TSMatrixError


def _read_samples(source: str, tz: str | None) -> tuple[str, list[tuple[pd.Timestamp, float]]]:
    """Load the first two columns of a CSV file as samples.

    Returns the name of the value column and the samples in file order.
    """
    from tsmatrix.time.timestamps import to_timestamp

    frame = pd.read_csv(sys.stdin if source == "-" else source)
    if frame.shape[1] < 2:
        raise ValueError(f"{source}: expected timestamp and value columns")
    ts_col, value_col = frame.columns[0], frame.columns[1]
    samples = [
        (to_timestamp(ts, tz), float(value))
        for ts, value in zip(frame[ts_col], frame[value_col])
    ]
    return str(value_col), samples


def _run_resample(args: argparse.Namespace) -> int:
    from tsmatrix.series.resample import samples_to_time_series

    name, samples = _read_samples(args.path, args.tz)
    index, vector = samples_to_time_series(samples, args.freq)
    series = pd.Series(vector, index=index.to_pandas(), name=name)
    series.to_csv(sys.stdout, date_format="%Y-%m-%dT%H:%M:%S%z")
    return 0


def _run_describe(args: argparse.Namespace) -> int:
    from tsmatrix.discovery import describe

    json.dump(describe(), sys.stdout, indent=2, default=str)
    print()
    return 0


def _run_version(args: argparse.Namespace) -> int:
    import tsmatrix

    print(tsmatrix.__version__)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsmatrix",
        description="tsmatrix: time-indexed numeric matrices with alignment arithmetic",
    )
    commands = parser.add_subparsers(dest="command")

    resample = commands.add_parser(
        "resample", help="Resample timestamp,value CSV rows onto a uniform grid"
    )
    resample.add_argument("path", help="CSV file with a header row, or '-' for stdin")
    resample.add_argument("--freq", default="D", help="Pandas offset alias (default: D)")
    resample.add_argument(
        "--tz", default=None, help="Timezone for naive timestamps (default: UTC)"
    )
    resample.set_defaults(handler=_run_resample)

    commands.add_parser("describe", help="Machine-readable API schema (JSON)").set_defaults(
        handler=_run_describe
    )
    commands.add_parser("version", help="Print version").set_defaults(handler=_run_version)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(args)
    except (TSMatrixError, ValueError, OSError) as exc:
        print(f"tsmatrix {args.command}: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
