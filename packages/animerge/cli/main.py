"""Command-line interface for animerge.

Bakes every rig of a timeline document into merged clips.
"""

from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
import sys

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, TaskID, TextColumn

from animerge.core.config.loader import load_app_config
from animerge.core.config.models import AppConfig
from animerge.core.export.exporter import ClipExporter
from animerge.core.merge.engine import MergeEngine
from animerge.core.merge.result import MergeResult
from animerge.core.timeline.loader import load_timeline
from animerge.core.utils.logging import configure_logging
from animerge.core.utils.math import clamp01

console = Console()
logger = logging.getLogger(__name__)


class RichDiagnostics:
    """Diagnostics sink that draws a rich progress bar and colored log lines."""

    def __init__(self, out: Console | None = None) -> None:
        self.console = out or console
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def begin(self, message: str | None) -> None:
        self.end()
        self._progress = Progress(
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            console=self.console,
            transient=True,
        )
        self._progress.start()
        self._task = self._progress.add_task(message or "", total=1.0)

    def update(self, message: str | None, progress: float) -> None:
        if self._progress is None or self._task is None:
            return
        self._progress.update(self._task, description=message or "", completed=clamp01(progress))

    def end(self) -> None:
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task = None

    def log_success(self, message: str | None) -> None:
        self.console.print(f"[green]✅ {escape(message or '')}[/green]")

    def log_error(self, message: str | None) -> None:
        self.console.print(f"[red]ERROR: {escape(message or '')}[/red]")

    def log_warning(self, message: str | None) -> None:
        self.console.print(f"[yellow]WARNING: {escape(message or '')}[/yellow]")


def print_result(result: MergeResult) -> None:
    """Print the summary of one rig."""
    rig = result.target_rig.name if result.target_rig is not None else "Unknown"
    status = "[green]✅[/green]" if result.is_success else "[red]❌[/red]"
    console.print(f"\n[bold]{rig}[/bold] {status}")
    clip = result.generated_clip
    if clip is not None:
        console.print(f"   Clip: {clip.name}")
        console.print(f"   Curves: {len(clip.curves)}")
        console.print(
            f"   Range: {clip.start_time:.3f}s - {clip.end_time:.3f}s @ {clip.frame_rate:g} fps"
        )
    for entry in result.logs:
        style = "red" if entry.startswith("[Error]") else "dim"
        console.print(f"   [{style}]{escape(entry)}[/{style}]", highlight=False)


def run_bake(args: argparse.Namespace) -> int:
    """Bake a timeline document.

    Returns:
        Exit code (0 when at least one rig produced a clip, 1 otherwise)
    """
    timeline_path = Path(args.timeline).resolve()

    try:
        app_config = load_app_config(args.app_config) if args.app_config else AppConfig()
    except Exception as e:
        console.print(f"[red]ERROR: Could not load config: {e}[/red]")
        return 1

    configure_logging(
        level=app_config.logging.level,
        format_string=app_config.logging.format,
        filename=app_config.logging.filename,
        structured=app_config.logging.structured,
    )

    if not timeline_path.exists():
        console.print(f"[red]ERROR: Timeline file not found: {timeline_path}[/red]")
        return 1

    try:
        timeline = load_timeline(timeline_path)
    except ValueError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 1

    merge_config = app_config.merge
    frame_rate = args.frame_rate or timeline.frame_rate or merge_config.frame_rate
    output_dir = Path(args.out or merge_config.output_dir)
    fmt = args.format or merge_config.output_format

    console.print(f"[bold]🎬 Timeline:[/bold] {timeline.name} ({len(timeline.arena)} tracks)")
    console.print(f"[bold]Frame rate:[/bold] {frame_rate:g} fps")

    engine = MergeEngine(merge_config, diagnostics=RichDiagnostics())
    results = engine.merge_all(timeline.arena, name=timeline.name, frame_rate=frame_rate)

    exporter = ClipExporter()
    for result in results:
        if result.is_success:
            exporter.export(result, output_dir, timeline.name, fmt=fmt)
        print_result(result)

    if not any(r.is_success for r in results):
        console.print("\n[red]No merged clips were produced[/red]")
        return 1

    console.print(f"\n[green]📁 Merged clips saved to:[/green] {output_dir}")
    return 0


def _positive_float(value: str) -> float:
    """argparse type for a finite rate > 0."""
    try:
        rate = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if not math.isfinite(rate) or rate <= 0:
        raise argparse.ArgumentTypeError(f"must be a finite number > 0, got {value}")
    return rate


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="animerge",
        description="animerge - bake layered timeline tracks into merged clips",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    bake = sub.add_parser("bake", help="Merge every rig of a timeline document")
    bake.add_argument("timeline", help="Path to timeline document (.json/.yaml)")
    bake.add_argument("--out", default=None, help="Output directory (default: from config)")
    bake.add_argument(
        "--frame-rate",
        type=_positive_float,
        default=None,
        help="Output frame rate (default: timeline, then config)",
    )
    bake.add_argument(
        "--app-config",
        default=None,
        help="Path to app config JSON/YAML",
    )
    bake.add_argument(
        "--format",
        choices=["json", "yaml"],
        default=None,
        help="Output serialization (default: from config)",
    )

    return p


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    if args.cmd == "bake":
        sys.exit(run_bake(args))
