"""Rendering of batch results for CI logs and terminals."""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from .models import BatchEntry, BatchResult


@dataclass(frozen=True)
class Report:
    summary: str
    exit_code: int
    total: int
    failing: int
    advisory_count: int
    overall_valid: bool


def _entry_label(entry: BatchEntry) -> str:
    label = f"{entry.source}: {entry.parsed.header}"
    if entry.advisory:
        label += " (advisory)"
    return label


def _advisory_count(result: BatchResult) -> int:
    return len(result.advisories) + sum(1 for e in result.entries if e.advisory)


def _summary_lines(result: BatchResult, failing: int, advisory_count: int) -> List[Tuple[str, str]]:
    """Summary as ``(style, text)`` pairs shared by the plain and rich output."""
    lines: List[Tuple[str, str]] = []
    for entry in result.entries:
        if entry.ok:
            lines.append(("green", f"{_entry_label(entry)} ... OK"))
            continue
        style = "yellow" if entry.advisory else "red"
        lines.append((style, _entry_label(entry)))
        lines.extend((style, f"  - {v.message}") for v in entry.violations)

    if result.advisories:
        lines.append(("", ""))
        lines.extend(("yellow", f"Warning: {advisory}") for advisory in result.advisories)

    lines.append(("", ""))
    lines.append(("", f"{len(result.entries)} checked, {failing} failing, {advisory_count} advisory"))
    if result.overall_valid:
        lines.append(("bold green", "Result: PASS"))
    else:
        lines.append(("bold red", "Result: FAIL"))
    return lines


def render(result: BatchResult, fail_on_error: bool = True) -> Report:
    """Render a batch result as plain text.

    The exit code is non-zero only when ``fail_on_error`` is set and the
    batch is invalid; the policy itself belongs to the caller.

    Args:
        result: The batch result to render
        fail_on_error: Caller policy for mapping an invalid batch to exit code 1

    Returns:
        Report: Summary text, exit code and counts
    """
    failing = len(result.failing_entries)
    advisory_count = _advisory_count(result)
    lines = _summary_lines(result, failing, advisory_count)

    return Report(
        summary="\n".join(text for _, text in lines),
        exit_code=1 if fail_on_error and not result.overall_valid else 0,
        total=len(result.entries),
        failing=failing,
        advisory_count=advisory_count,
        overall_valid=result.overall_valid,
    )


def render_json(result: BatchResult) -> str:
    """Machine-readable form of a batch result."""
    return result.model_dump_json(indent=2)


def print_report(result: BatchResult, report: Report, console: Optional[Console] = None) -> None:
    """Print the same lines as ``report.summary`` with rich colors."""
    console = console or Console()
    for style, text in _summary_lines(result, report.failing, report.advisory_count):
        if style:
            console.print(f"[{style}]{escape(text)}[/{style}]", highlight=False)
        else:
            console.print(escape(text), highlight=False)
