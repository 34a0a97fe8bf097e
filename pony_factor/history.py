import logging
import re
import subprocess
from pathlib import Path
from typing import Protocol

from data import Commit, Commits

ENCODING = "utf-8"
DEFAULT_HOST = "github.com"

LOG_LINE: re.Pattern[str] = re.compile(
    r"^(?P<hash>[0-9a-fA-F]+)\s+"
    r"(?P<date>\d{4}-\d{2}-\d{2})\s+"
    r"(?P<time>\d{2}:\d{2}:\d{2})\s+"
    r"(?P<offset>[+-]\d{4})\s+"
    r"(?P<name>.+)$"
)

logger = logging.getLogger(__name__)


class HistoryError(RuntimeError):
    pass


class FetchError(HistoryError):
    def __init__(self, location: str, target: Path):
        super().__init__(f"could not clone {location} into {target}")
        self.location = location
        self.target = target


class HistoryQueryError(HistoryError):
    pass


class MalformedHistoryLineError(HistoryError, ValueError):
    def __init__(self, line: str):
        super().__init__(f"unexpected git log line: {line!r}")
        self.line = line


class HistorySource(Protocol):
    def fetch(self, url: str, target: Path) -> bool: ...

    def list_commits(self, path: Path) -> Commits: ...


def parse_log_line(line: str) -> Commit:
    """
    Parse one "<hash> <date> <time> <offset> <author name>" line

    :param line: single line of git log output
    :return: parsed commit
    :raises MalformedHistoryLineError: if the line does not have that shape
    """
    match = LOG_LINE.match(line)
    if match is None:
        raise MalformedHistoryLineError(line)
    date = " ".join(match.group("date", "time", "offset"))
    return Commit(hash=match["hash"], date=date, author=match["name"])


def parse_log(output: str) -> Commits:
    return [parse_log_line(line) for line in output.splitlines()]


class GitHistorySource:
    def __init__(self, git: str = "git"):
        self.git = git

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess:
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            return subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding=ENCODING,
            )
        except FileNotFoundError as e:
            raise HistoryQueryError(f"{self.git} executable not found") from e

    def fetch(self, url: str, target: Path) -> bool:
        result = self._run([self.git, "clone", "--quiet", url, str(target)])
        if result.returncode != 0:
            logger.error(f"git clone failed: {result.stderr.strip()}")
            return False
        return True

    def list_commits(self, path: Path) -> Commits:
        result = self._run(
            [
                self.git,
                "-C",
                str(path),
                "log",
                "--pretty=format:%h %ad %an",
                "--date=iso",
            ]
        )
        if result.returncode != 0:
            raise HistoryQueryError(
                f"git log failed in {path}: {result.stderr.strip()}"
            )
        return parse_log(result.stdout)


def remote_url(owner_repo: str, host: str = DEFAULT_HOST) -> str:
    owner_repo = owner_repo.strip("/")
    if owner_repo.count("/") != 1:
        raise ValueError(f"expected owner/repo, got {owner_repo!r}")
    return f"https://{host}/{owner_repo}.git"


def fetch_remote(
    owner_repo: str,
    workdir: Path,
    source: HistorySource,
    host: str = DEFAULT_HOST,
) -> tuple[Path, bool]:
    """
    Clone owner/repo into a fresh subdirectory of workdir

    The caller owns workdir and is responsible for removing it.

    :param owner_repo: "owner/repo" identifier
    :param workdir: existing directory to clone into
    :param source: history source performing the clone
    :param host: git host the url is built for
    :return: path of the working copy and whether the clone succeeded
    """
    url = remote_url(owner_repo, host)
    local_path = workdir / owner_repo.strip("/").split("/")[-1]
    logger.info(f"Cloning {url} into {local_path}")
    return local_path, source.fetch(url, local_path)


def list_commits(path: Path, source: HistorySource) -> Commits:
    commits = source.list_commits(path)
    logger.info(f"Read {len(commits)} commits from {path}")
    return commits
