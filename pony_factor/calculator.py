import logging
import tempfile
from datetime import date, datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from data import (
    Commit,
    Commits,
    ContributorStat,
    ContributorStats,
    CoverageUndefined,
    CoveringSet,
    PonyFactorResult,
)
from history import (
    DEFAULT_HOST,
    FetchError,
    GitHistorySource,
    HistorySource,
    fetch_remote,
    list_commits,
)

COVERAGE_SHARE = 0.5

logger = logging.getLogger(__name__)


def aggregate(commits: Iterable[Commit]) -> Mapping[str, ContributorStat]:
    """
    Fold commits into per-author statistics in a single pass

    Commit dates are compared as strings, which orders them correctly only
    because git's iso date format is fixed width and zero padded.

    :param commits: commits in any order
    :return: read-only mapping author name -> stats, in first-seen order
    """
    stats: dict[str, ContributorStat] = {}
    for commit in commits:
        seen = stats.get(commit.author)
        if seen is None:
            stats[commit.author] = ContributorStat(commit.author, commit.date, 1)
        else:
            stats[commit.author] = ContributorStat(
                commit.author,
                max(seen.last_commit_date, commit.date),
                seen.commit_count + 1,
            )
    return MappingProxyType(stats)


def rank(stats: Iterable[ContributorStat]) -> ContributorStats:
    # stable: equal counts keep first-seen order
    return sorted(stats, key=lambda s: s.commit_count, reverse=True)


def recency_cutoff(today: date | None = None) -> str:
    """
    Date string one year before today (UTC), in the "YYYY-MM-DD" prefix form
    of a commit date.

    Month and day are kept as they are, so Feb 29 gives a nonexistent date
    string. It still compares correctly against real dates.
    """
    if today is None:
        today = datetime.now(timezone.utc).date()
    return f"{today.year - 1:04d}-{today.month:02d}-{today.day:02d}"


def filter_active(stats: ContributorStats, cutoff: str) -> ContributorStats:
    # "2024-06-01 10:00:00 +0000" > "2024-06-01", so a commit on the cutoff
    # day itself counts as recent
    return [s for s in stats if s.last_commit_date > cutoff]


def select_covering_set(active: ContributorStats, total: int) -> PonyFactorResult:
    """
    Pick the top contributors until they cover half of all commits

    :param active: ranked contributors that passed the recency filter
    :param total: number of commits in the whole history, not only active ones
    :return: covering set, or the percentage of the threshold reached
    """
    threshold = total * COVERAGE_SHARE
    covered = 0
    selected: ContributorStats = []
    for stat in active:
        if covered >= threshold:
            break
        selected.append(stat)
        covered += stat.commit_count

    if covered >= threshold:
        return CoveringSet(selected)
    return CoverageUndefined(round(covered / threshold * 100, 2))


def active_contributors(
    commits: Commits, today: date | None = None
) -> ContributorStats:
    return filter_active(rank(aggregate(commits).values()), recency_cutoff(today))


def pony_factor(commits: Commits, today: date | None = None) -> PonyFactorResult:
    active = active_contributors(commits, today)
    logger.debug(f"{len(active)} contributors committed within the last year")
    return select_covering_set(active, len(commits))


def load_commits(
    location: str,
    from_local_directory: bool,
    source: HistorySource | None = None,
    host: str = DEFAULT_HOST,
) -> Commits:
    """
    Read the history of a local working copy or a remote repository

    A remote repository is cloned into a temporary directory which is removed
    once its history has been read, whatever the outcome.

    :param location: path of a working copy, or "owner/repo"
    :param from_local_directory: treat location as a path
    :param source: history source, git by default
    :param host: git host for remote repositories
    :raises FetchError: if the clone failed
    :raises HistoryQueryError: if git log failed
    :raises MalformedHistoryLineError: if git log output was not understood
    """
    if source is None:
        source = GitHistorySource()

    if from_local_directory:
        return list_commits(Path(location), source)

    with tempfile.TemporaryDirectory(prefix="pony_factor_") as workdir:
        local_path, ok = fetch_remote(location, Path(workdir), source, host)
        if not ok:
            raise FetchError(location, local_path)
        return list_commits(local_path, source)


def calculate(
    location: str,
    from_local_directory: bool,
    source: HistorySource | None = None,
    today: date | None = None,
    host: str = DEFAULT_HOST,
) -> PonyFactorResult:
    return pony_factor(
        load_commits(location, from_local_directory, source, host), today
    )
