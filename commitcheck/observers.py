"""Observer pattern for validation progress."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console

from .models import BatchEntry, BatchResult


class ValidationObserver(ABC):
    """Abstract base class for validation observers."""

    @abstractmethod
    def on_entry_validated(self, entry: BatchEntry) -> None:
        """Called when a single message has been evaluated."""
        pass

    @abstractmethod
    def on_batch_completed(self, result: BatchResult) -> None:
        """Called when the whole batch has been evaluated."""
        pass


class ConsoleLogObserver(ValidationObserver):
    """Observer that logs validation progress to the console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def on_entry_validated(self, entry: BatchEntry) -> None:
        if entry.ok:
            self.console.print(f"[dim]Checked {entry.source}: ok[/dim]")
        else:
            self.console.print(
                f"[dim]Checked {entry.source}: {len(entry.violations)} violation(s)[/dim]"
            )

    def on_batch_completed(self, result: BatchResult) -> None:
        status = "passed" if result.overall_valid else "failed"
        self.console.print(
            f"[dim]Validated {len(result.entries)} message(s), batch {status}[/dim]"
        )


class FileLogObserver(ValidationObserver):
    """Observer that logs validation progress to a file."""

    def __init__(self, log_file: str):
        self.log_file = Path(log_file)
        # Ensure the parent directory exists
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    def _log(self, message: str) -> None:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with self.log_file.open("a") as f:
            f.write(f"{timestamp} - {message}\n")

    def on_entry_validated(self, entry: BatchEntry) -> None:
        if entry.ok:
            self._log(f"{entry.source}: OK - {entry.parsed.header}")
            return
        fields = ", ".join(v.field.value for v in entry.violations)
        advisory = " (advisory)" if entry.advisory else ""
        self._log(f"{entry.source}: FAIL{advisory} [{fields}] - {entry.parsed.header}")

    def on_batch_completed(self, result: BatchResult) -> None:
        status = "passed" if result.overall_valid else "failed"
        self._log(
            f"Batch {status}: {len(result.entries)} entries, "
            f"{len(result.failing_entries)} failing"
        )
        for advisory in result.advisories:
            self._log(f"Advisory: {advisory}")
