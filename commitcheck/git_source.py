"""Collect commit messages from a git repository."""
from pathlib import Path
from typing import List, Optional, Tuple, Union

import git
from git import Repo


class CommitSourceError(Exception):
    """Raised when commits cannot be read from the repository."""


def collect_commits(
    repo_path: Union[str, Path],
    rev_range: Optional[str] = None,
    max_count: Optional[int] = None,
) -> List[Tuple[str, str]]:
    """Read commit messages for a revision range.

    Merge commits are skipped, the same way a pull request's commit list
    only carries the authored commits.

    Args:
        repo_path: Path to the git repository
        rev_range: Revision or range such as ``origin/main..HEAD``;
            defaults to ``HEAD``
        max_count: Optional limit on the number of commits read

    Returns:
        List[Tuple[str, str]]: ``(short_sha, message)`` pairs, oldest first

    Raises:
        CommitSourceError: If the repository or range cannot be read
    """
    try:
        repo = Repo(str(repo_path))
        kwargs = {"no_merges": True}
        if max_count is not None:
            kwargs["max_count"] = max_count
        commits = list(repo.iter_commits(rev_range or "HEAD", **kwargs))
    except git.InvalidGitRepositoryError as e:
        raise CommitSourceError(f"Not a git repository: {e}") from e
    except git.NoSuchPathError as e:
        raise CommitSourceError(f"Repository path does not exist: {e}") from e
    except (git.GitCommandError, ValueError) as e:
        raise CommitSourceError(f"Cannot read commits for '{rev_range or 'HEAD'}': {e}") from e

    commits.reverse()
    return [(commit.hexsha[:7], commit.message) for commit in commits]
