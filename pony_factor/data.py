from dataclasses import dataclass, field


@dataclass(frozen=True)
class Commit:
    hash: str
    # "YYYY-MM-DD HH:MM:SS +ZZZZ", fixed width, compared as a plain string
    date: str
    author: str


Commits = list[Commit]


@dataclass(frozen=True)
class ContributorStat:
    name: str
    last_commit_date: str
    commit_count: int


ContributorStats = list[ContributorStat]


@dataclass(frozen=True)
class CoveringSet:
    contributors: ContributorStats = field(default_factory=list)

    @property
    def pony_factor(self) -> int:
        return len(self.contributors)


@dataclass(frozen=True)
class CoverageUndefined:
    percentage: float


PonyFactorResult = CoveringSet | CoverageUndefined
