"""Progress bar component using rich."""

from typing import Any

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn


class LoadingBar:
    """Wrapper around rich.Progress for multi-request fetches.

    Drawn on stderr and cleared when finished so it never mixes with table
    output on stdout.

    Example usage:
        with LoadingBar("Fetching pages", total=total_pages - 1) as bar:
            for page in range(2, total_pages + 1):
                await store.fetch_page(...)
                bar.advance()
    """

    def __init__(self, description: str, total: int, transient: bool = True):
        """Initialize a loading bar.

        Args:
            description: Text description of the task
            total: Total number of steps
            transient: Remove the bar from the terminal when finished
        """
        self.description = description
        self.total = total
        self.progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TextColumn("({task.completed}/{task.total})"),
            console=Console(stderr=True),
            transient=transient,
        )
        self.task_id: TaskID | None = None

    def start(self) -> None:
        self.progress.start()
        self.task_id = self.progress.add_task(self.description, total=self.total)

    def advance(self, amount: int = 1) -> None:
        if self.task_id is not None:
            self.progress.update(self.task_id, advance=amount)

    def finish(self) -> None:
        self.progress.stop()

    def __enter__(self) -> "LoadingBar":
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.finish()
