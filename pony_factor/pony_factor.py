#!/usr/bin/env python3

import argparse
import logging
import sys

import calculator
from data import ContributorStats, CoverageUndefined, CoveringSet, PonyFactorResult
from exporters import export_data, exporters
from history import DEFAULT_HOST, HistoryError
from plotters import plot_contributors

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

LOG_FORMAT = "%(levelname)s: %(message)s"


def setup_logging(verbose: bool) -> logging.Logger:
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(ch)
    return logger


def format_result(result: CoveringSet) -> str:
    lines = [
        f"{s.name}\t{s.commit_count}\t{s.last_commit_date}"
        for s in result.contributors
    ]
    lines += ["", f"Pony Factor = {result.pony_factor}"]
    return "\n".join(lines)


def report(result: PonyFactorResult) -> int:
    if isinstance(result, CoverageUndefined):
        print(
            "Pony Factor is undefined: contributors active within the last "
            f"year reach only {result.percentage}% of the 50% threshold"
        )
        return EXIT_FAILURE
    print(format_result(result))
    return EXIT_SUCCESS


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Calculate the Pony Factor of a git repository"
    )
    parser.add_argument("location", help="owner/repo, or a path with --directory")
    parser.add_argument(
        "--directory",
        action="store_true",
        help="treat location as a local working copy instead of cloning it",
    )
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--export", choices=sorted(exporters))
    parser.add_argument("--export-output")
    parser.add_argument("--plot-output")
    args = parser.parse_args()

    logger = setup_logging(args.verbose)

    try:
        commits = calculator.load_commits(
            args.location, from_local_directory=args.directory, host=args.host
        )
    except (HistoryError, ValueError) as e:
        logger.error(e)
        return EXIT_FAILURE

    active: ContributorStats = calculator.active_contributors(commits)
    result = calculator.select_covering_set(active, len(commits))

    if args.export and args.export_output:
        written = export_data(active, fmt=args.export, output_file=args.export_output)
        logger.info(f"Exported {len(active)} contributors to {written}")

    if args.plot_output and active:
        plot_contributors(active, result, len(commits), args.plot_output)
        logger.info(f"Plot saved to {args.plot_output}")

    return report(result)


if __name__ == "__main__":
    ret: int = main()
    sys.exit(ret)
