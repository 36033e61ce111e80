"""Batch validation of commit messages and a pull-request title."""
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .models import BatchEntry, BatchResult, EntryKind
from .observers import ValidationObserver
from .rules import RuleSet
from .validator import CommitMessageValidator

TITLE_SOURCE = "PR title"
NO_COMMITS_ADVISORY = "no commits found to validate"
NO_TITLE_ADVISORY = "no PR title supplied to validate"


@dataclass(frozen=True)
class BatchOptions:
    validate_title: bool = True
    validate_commits: bool = True


class BatchValidator:
    """Runs the rule evaluator over a PR title and a list of commits.

    Every input is parsed and evaluated independently. Entries from a
    disabled category are still evaluated but flagged advisory, and do not
    affect the overall verdict.

    Attributes:
        rules (RuleSet): The rule set applied to every message
        options (BatchOptions): Which categories count toward the verdict
        observers (List[ValidationObserver]): Observers to notify
    """

    def __init__(self, rules: RuleSet, options: Optional[BatchOptions] = None):
        self.rules = rules
        self.options = options or BatchOptions()
        self.validator = CommitMessageValidator(rules)
        self.observers: List[ValidationObserver] = []

    def add_observer(self, observer: ValidationObserver) -> None:
        self.observers.append(observer)

    def remove_observer(self, observer: ValidationObserver) -> None:
        self.observers.remove(observer)

    def _entry(self, source: str, kind: EntryKind, raw: str, advisory: bool) -> BatchEntry:
        parsed, violations = self.validator.validate(raw)
        return BatchEntry(
            source=source,
            kind=kind,
            parsed=parsed,
            violations=violations,
            advisory=advisory,
        )

    def run(
        self,
        title: Optional[str],
        commits: Sequence[str],
        commit_ids: Optional[Sequence[str]] = None,
    ) -> BatchResult:
        """Validate the title and commits.

        Args:
            title: The PR title, or None when there is none
            commits: Raw commit messages in order
            commit_ids: Optional identifiers (SHAs) matching ``commits``;
                defaults to ``commit #N``

        Returns:
            BatchResult: Entries in input order (title first) and the verdict
        """
        if commit_ids is not None and len(commit_ids) != len(commits):
            raise ValueError("commit_ids must have the same length as commits")
        ids = list(commit_ids) if commit_ids is not None else [
            f"commit #{i}" for i in range(1, len(commits) + 1)
        ]

        entries = []
        if title is not None:
            entries.append(
                self._entry(TITLE_SOURCE, EntryKind.TITLE, title, not self.options.validate_title)
            )
        entries.extend(
            self._entry(source, EntryKind.COMMIT, raw, not self.options.validate_commits)
            for source, raw in zip(ids, commits)
        )

        advisories = []
        no_commits = self.options.validate_commits and not commits
        if no_commits:
            advisories.append(NO_COMMITS_ADVISORY)
        if self.options.validate_title and title is None:
            advisories.append(NO_TITLE_ADVISORY)

        result = BatchResult(
            entries=entries,
            overall_valid=all(e.ok for e in entries if e.counts_toward_verdict),
            no_commits=no_commits,
            advisories=advisories,
        )

        for entry in result.entries:
            for observer in self.observers:
                observer.on_entry_validated(entry)
        for observer in self.observers:
            observer.on_batch_completed(result)
        return result


def validate_batch(
    title: Optional[str],
    commits: Sequence[str],
    rules: RuleSet,
    options: Optional[BatchOptions] = None,
    commit_ids: Optional[Sequence[str]] = None,
) -> BatchResult:
    """Validate a PR title and commit messages against ``rules``."""
    return BatchValidator(rules, options).run(title, commits, commit_ids)
