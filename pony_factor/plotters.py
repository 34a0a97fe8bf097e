from itertools import accumulate
from pathlib import Path

import matplotlib.pyplot as plt

from data import ContributorStats, CoveringSet, PonyFactorResult


def plot_contributors(
    active: ContributorStats,
    result: PonyFactorResult,
    total: int,
    output_file: Path,
) -> None:
    """
    Bar chart of commits per active contributor, covering set highlighted
    """
    if not active:
        raise ValueError("No contributors provided")

    covering = set()
    if isinstance(result, CoveringSet):
        covering = {s.name for s in result.contributors}

    names = [s.name for s in active]
    counts = [s.commit_count for s in active]
    colors = ["tab:red" if name in covering else "tab:blue" for name in names]

    fig, ax = plt.subplots(figsize=(12, 6))
    rects = ax.bar(names, counts, color=colors)
    ax.bar_label(rects, label_type="edge")

    cumulative = list(accumulate(counts))
    ax.plot(names, cumulative, color="black", marker="o", label="cumulative")
    ax.axhline(total / 2, color="gray", linestyle="--", label="50% of commits")

    if isinstance(result, CoveringSet):
        title = f"Pony Factor = {result.pony_factor}"
    else:
        title = f"Pony Factor undefined ({result.percentage}% of threshold)"
    ax.set_title(f"{title}, {total} commits total")
    ax.set_xlabel("Contributor")
    ax.set_ylabel("Number of Commits")
    ax.legend(loc="upper right")
    plt.xticks(rotation=45, ha="right")
    plt.tight_layout()
    plt.savefig(output_file)
    plt.close(fig)
