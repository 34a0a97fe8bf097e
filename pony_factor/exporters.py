import csv
import json
from dataclasses import asdict
from pathlib import Path
from typing import Callable

from data import ContributorStats

FIELDNAMES = ["name", "commit_count", "last_commit_date"]


def export_json(stats: ContributorStats, out: Path) -> None:
    with open(out, "w", encoding="utf-8") as f:
        json.dump([asdict(s) for s in stats], f, indent=2, ensure_ascii=False)


def export_csv(stats: ContributorStats, out: Path) -> None:
    with open(out, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for stat in stats:
            writer.writerow(asdict(stat))


ExportFn = Callable[[ContributorStats, Path], None]
exporters: dict[str, ExportFn] = {"json": export_json, "csv": export_csv}


def export_data(stats: ContributorStats, fmt: str, output_file: Path) -> Path:
    """
    Export contributor statistics as json/csv file

    :param stats: ranked contributor statistics
    :param fmt: "json" or "csv"
    :param output_file: target path, the extension is appended if missing
    :return: path actually written
    """
    if fmt not in exporters:
        raise ValueError("Unsupported export file format")
    output_file = Path(output_file)
    if output_file.suffix.lower() != f".{fmt}":
        output_file = output_file.with_name(f"{output_file.name}.{fmt}")
    exporters[fmt](stats, output_file)
    return output_file
