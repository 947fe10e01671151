"""CLI interface for dsviz."""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dsviz.core.animation import AnimationToolkit
from dsviz.core.constants import DEFAULT_DURATION_MS, DEFAULT_SPEED, FRAME_INTERVAL_MS
from dsviz.core.diff import compute_diff
from dsviz.core.engines import engine_from_snapshot
from dsviz.core.errors import DsvizError
from dsviz.core.global_ctrl import GlobalController
from dsviz.core.log import setup_default_logging
from dsviz.core.persistence import load_snapshot_file, save_snapshot
from dsviz.core.scheduler import FrameDriver
from dsviz.core.session import StructureSession
from dsviz.core.types import StructureKind, Transition

console = Console()
err_console = Console(stderr=True)

DEMO_VALUES = [1, 2, 3, 4, 5]
DEMO_OPERATIONS: List[Tuple[str, Tuple[Any, ...]]] = [
    ("push", (6,)),
    ("insert", (2, 99)),
    ("pop", ()),
]

app = typer.Typer(help="Turn data-structure snapshots into replayable animation steps.")


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""
    pass


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        envvar="DSVIZ_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
) -> None:
    try:
        setup_default_logging(log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level")


@app.command()
def diff(
    old: Path = typer.Argument(..., help="Snapshot file before the change"),
    new: Path = typer.Argument(..., help="Snapshot file after the change"),
    as_json: bool = typer.Option(False, "--json", help="Print transitions as JSON"),
) -> None:
    """
    Print the transitions between two saved snapshots of the same structure.

    Examples:
      dsviz demo --save-dir snaps
      dsviz diff snaps/step-0.json snaps/step-1.json
    """
    try:
        kind, transitions = _diff_files(old, new)
        if as_json:
            console.print_json(data=[t.to_dict() for t in transitions])
        else:
            _print_transitions(kind, transitions)
    except CLIError as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)


@app.command()
def play(
    old: Path = typer.Argument(..., help="Snapshot file before the change"),
    new: Path = typer.Argument(..., help="Snapshot file after the change"),
    speed: float = typer.Option(DEFAULT_SPEED, "--speed", help="Playback speed multiplier (0.1 - 4.0)"),
    loop: bool = typer.Option(False, "--loop/--no-loop", help="Restart from the first step at the end"),
    frame_ms: int = typer.Option(FRAME_INTERVAL_MS, "--frame-ms", help="Simulated frame length in ms"),
    duration: int = typer.Option(DEFAULT_DURATION_MS, "--duration", help="Duration of each step in ms"),
    max_frames: int = typer.Option(1000, "--max-frames", help="Stop after this many frames"),
) -> None:
    """Play the transitions between two snapshots on a timeline with simulated frames."""
    try:
        if frame_ms <= 0:
            raise CLIError("--frame-ms must be positive")
        _, transitions = _diff_files(old, new)
        instructions = AnimationToolkit(duration=duration).generate(transitions)
        if not instructions:
            console.print("[yellow]No changes to play.[/yellow]")
            return

        ctrl = GlobalController()
        try:
            timeline = ctrl.get_orchestrator("cli")
            applied = ctrl.set_speed(speed)
            timeline.set_loop(loop)
            timeline.create_timeline(instructions)
            timeline.instructionStarted.connect(
                lambda instruction, _handle: console.print(
                    f"[cyan]step {timeline.current_step + 1}/{timeline.total_steps}[/cyan] "
                    f"{instruction.verb.value} {instruction.target_id}"
                )
            )
            driver = FrameDriver(timeline, interval_ms=frame_ms)

            console.print(
                f"[bold blue]Playing {len(instructions)} steps at {applied:g}x...[/bold blue]"
            )
            timeline.play()
            frames = 0
            while frames < max_frames and driver.tick(frame_ms):
                frames += 1
            console.print(
                f"[green]✓[/green] {frames} frames, state {timeline.state.value}, "
                f"step {timeline.current_step + 1}/{timeline.total_steps}"
            )
        finally:
            ctrl.destroy_all()
    except CLIError as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)


@app.command()
def demo(
    save_dir: Optional[Path] = typer.Option(
        None, "--save-dir", help="Write a snapshot file for every step into this directory"
    ),
) -> None:
    """Run a short array scenario and show the transitions of every step."""
    try:
        session = StructureSession(GlobalController(), StructureKind.ARRAY, values=DEMO_VALUES)
        console.print(f"[bold blue]array {escape(str(DEMO_VALUES))}[/bold blue]")
        if save_dir:
            _save(save_dir / "step-0.json", session.kind, session.engine.snapshot())

        for operation, args in DEMO_OPERATIONS:
            session.perform(operation, *args)
            step = session.history[-1]
            console.print(
                f"\n[bold]{escape(step.description)}[/bold]  "
                f"{escape(str(step.snapshot['data']))}"
            )
            _print_transitions(session.kind, step.transitions)
            if save_dir:
                _save(save_dir / f"step-{step.index + 1}.json", session.kind, step.snapshot)

        if save_dir:
            console.print(f"\n[green]✓[/green] Snapshots saved to {save_dir}")
    except CLIError as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)


def _load(path: Path) -> Tuple[StructureKind, Dict[str, Any]]:
    try:
        return load_snapshot_file(path)
    except FileNotFoundError:
        raise CLIError(f"File '{path}' not found")
    except (DsvizError, OSError) as e:
        raise CLIError(str(e))


def _save(path: Path, kind: StructureKind, snapshot: Dict[str, Any]) -> None:
    try:
        save_snapshot(path, kind, snapshot)
    except OSError as e:
        raise CLIError(f"Failed to save file '{path}': {e}")


def _diff_files(old: Path, new: Path) -> Tuple[StructureKind, List[Transition]]:
    old_kind, old_snapshot = _load(old)
    new_kind, new_snapshot = _load(new)
    if old_kind is not new_kind:
        raise CLIError(f"Cannot diff a {old_kind.value} snapshot against a {new_kind.value} snapshot")
    for path, snapshot in ((old, old_snapshot), (new, new_snapshot)):
        try:
            engine_from_snapshot(old_kind, snapshot)
        except DsvizError as e:
            raise CLIError(f"{path}: {e}")
    return old_kind, compute_diff(old_snapshot, new_snapshot, old_kind)


def _format_payload(payload: Optional[Dict[str, Any]]) -> str:
    if payload is None:
        return "-"
    return ", ".join(f"{key}={value!r}" for key, value in payload.items())


def _print_transitions(kind: StructureKind, transitions) -> None:
    if not transitions:
        console.print("[dim]no changes[/dim]")
        return
    table = Table(title=f"{kind.value} transitions")
    table.add_column("#", justify="right")
    table.add_column("Type", style="bold")
    table.add_column("Element")
    table.add_column("From")
    table.add_column("To")
    for index, transition in enumerate(transitions):
        table.add_row(
            str(index),
            transition.kind.value,
            transition.element_id,
            escape(_format_payload(transition.from_)),
            escape(_format_payload(transition.to)),
        )
    console.print(table)


if __name__ == "__main__":
    app()
