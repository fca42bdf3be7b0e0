"""Progress indication for long-running conda and docker steps.

In interactive terminals a Rich spinner is displayed while an external command
runs. In non-interactive terminals (CI, logs) status messages are logged instead.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, List, Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

if TYPE_CHECKING:
    from logging import Logger

SetDescriptionFunc = Callable[[str], None]
AdvanceStageFunc = Callable[..., None]


def is_interactive_terminal() -> bool:
    """Return True when output goes to an interactive terminal."""
    return Console().is_terminal


@contextmanager
def progress_context(
    description: str,
    logger: Optional["Logger"] = None,
    transient: bool = True,
) -> Iterator[SetDescriptionFunc]:
    """Show an indeterminate spinner while the body of the block runs.

    Args:
        description: Text shown next to the spinner (or logged).
        logger: Logger used for the status line in non-interactive mode.
        transient: If True, the spinner is cleared when the block exits.

    Yields:
        set_description(desc) to update the spinner text.
    """
    if not is_interactive_terminal():
        if logger is not None:
            logger.status(f"{description}...")

        def noop_set_description(desc: str) -> None:
            pass

        yield noop_set_description
        return

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        transient=transient,
    )
    try:
        progress.start()
        task_id: TaskID = progress.add_task(description, total=None)

        def set_description(desc: str) -> None:
            progress.update(task_id, description=desc)

        yield set_description
    finally:
        progress.stop()


@contextmanager
def create_stage_progress(
    stages: List[str],
    logger: Optional["Logger"] = None,
    transient: bool = True,
) -> Iterator[AdvanceStageFunc]:
    """Track a sequence of named stages, e.g. the steps of a freeze.

    Yields:
        advance_stage(stage_name=None): moves to the next stage; stage_name
        overrides the description of the new stage.

    Example:
        >>> with create_stage_progress(["Resolving", "Validating", "Writing"]) as advance:
        ...     resolve()
        ...     advance()
        ...     validate()
        ...     advance()
        ...     write()
    """
    if not stages:
        def noop_advance(stage_name: Optional[str] = None) -> None:
            pass

        yield noop_advance
        return

    current_stage_idx = 0

    if not is_interactive_terminal():
        if logger is not None:
            logger.status(f"Stage 1/{len(stages)}: {stages[0]}...")

        def advance_stage_noninteractive(stage_name: Optional[str] = None) -> None:
            nonlocal current_stage_idx
            current_stage_idx += 1
            if current_stage_idx < len(stages) and logger is not None:
                desc = stage_name if stage_name else stages[current_stage_idx]
                logger.status(f"Stage {current_stage_idx + 1}/{len(stages)}: {desc}...")

        yield advance_stage_noninteractive
        return

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        transient=transient,
    )
    try:
        progress.start()
        task_id: TaskID = progress.add_task(stages[0], total=len(stages), completed=1)

        def advance_stage_interactive(stage_name: Optional[str] = None) -> None:
            nonlocal current_stage_idx
            current_stage_idx += 1
            if current_stage_idx < len(stages):
                desc = stage_name if stage_name else stages[current_stage_idx]
                progress.update(task_id, advance=1, description=desc)

        yield advance_stage_interactive
    finally:
        progress.stop()


__all__ = [
    "is_interactive_terminal",
    "progress_context",
    "create_stage_progress",
]
