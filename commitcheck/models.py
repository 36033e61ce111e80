"""Shared models for commitcheck."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class CommitType(str, Enum):
    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CHORE = "chore"
    REVERT = "revert"


DEFAULT_TYPES = frozenset(t.value for t in CommitType)


class ViolationField(str, Enum):
    """Categories a rule violation can belong to."""

    TYPE = "type"
    SCOPE = "scope"
    SUBJECT_CASE = "subject-case"
    SUBJECT_LENGTH_MIN = "subject-length-min"
    SUBJECT_LENGTH_MAX = "subject-length-max"
    SUBJECT_PUNCTUATION = "subject-punctuation"
    HEADER_LENGTH = "header-length"
    FORMAT = "format"


class EntryKind(str, Enum):
    COMMIT = "commit"
    TITLE = "title"


@dataclass(frozen=True)
class Violation:
    field: ViolationField
    message: str


@dataclass(frozen=True)
class ParsedMessage:
    """A raw message split into its Conventional Commit parts.

    ``type``, ``scope`` and ``subject`` are None when the header does not
    match the grammar. ``scope`` is the empty string for a header like
    ``feat(): ...``.
    """

    raw: str
    header: str
    type: Optional[str] = None
    scope: Optional[str] = None
    breaking: bool = False
    subject: Optional[str] = None
    body: str = ""
    footers: Tuple[str, ...] = field(default_factory=tuple)
    breaking_change_footer: bool = False

    @property
    def is_conventional(self) -> bool:
        return self.type is not None and self.subject is not None


class BatchEntry(BaseModel):
    source: str = Field(description="Commit SHA, commit index or 'PR title'")
    kind: EntryKind
    parsed: ParsedMessage
    violations: List[Violation] = Field(default_factory=list)
    advisory: bool = Field(
        default=False,
        description="Computed for reporting only, excluded from the verdict",
    )

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def counts_toward_verdict(self) -> bool:
        return not self.advisory


class BatchResult(BaseModel):
    entries: List[BatchEntry] = Field(default_factory=list)
    overall_valid: bool = True
    no_commits: bool = Field(
        default=False,
        description="Commit validation was enabled but no commits were supplied",
    )
    advisories: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def failing_entries(self) -> List[BatchEntry]:
        return [e for e in self.entries if e.counts_toward_verdict and not e.ok]
