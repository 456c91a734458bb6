from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from .diagrams import DiagramFormatError, DiagramKind, UnknownDiagramError, load_catalog
from .navigation import NavigationError
from .render import (
    diagram_to_markdown,
    render_catalog_table,
    render_tree_outline,
    render_walkthrough_outline,
)

ENV_FILE = "DIAGRAMWALK_FILE"


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Step through educational diagrams and decision trees"
    )
    parser.add_argument(
        "diagram_file",
        nargs="?",
        default=os.environ.get(ENV_FILE),
        help=f"JSON file with diagram definitions (default: ${ENV_FILE})",
    )
    parser.add_argument("--diagram", "-d", default=None, help="Diagram id to show")
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the diagrams in the file",
    )
    parser.add_argument(
        "--tui",
        action="store_true",
        help="Walk the selected diagram interactively",
    )
    parser.add_argument(
        "--export-markdown",
        default=None,
        help="Write the selected diagram(s) to a Markdown file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log navigation and loading details",
    )

    args = parser.parse_args(argv)
    if not args.diagram_file:
        parser.error(f"a diagram file is required (or set ${ENV_FILE})")

    configure_logging(args.verbose)
    console = console or Console()

    try:
        catalog = load_catalog(Path(args.diagram_file))
        if args.list:
            console.print(render_catalog_table(catalog))
            return 0

        diagrams = [catalog.get(args.diagram)] if args.diagram else list(catalog)

        if args.export_markdown:
            path = Path(args.export_markdown)
            path.write_text(
                "\n".join(diagram_to_markdown(diagram) for diagram in diagrams),
                encoding="utf-8",
            )
            console.print(f"Exported {len(diagrams)} diagram(s) to {path}", markup=False)
            return 0

        if args.tui:
            if len(diagrams) != 1:
                console.print("Select one diagram with --diagram to use --tui.")
                return 1
            from .tui import run_tui

            run_tui(diagrams[0], console=console)
            return 0

        for diagram in diagrams:
            if diagram.kind is DiagramKind.WALKTHROUGH:
                console.print(render_walkthrough_outline(diagram))
            else:
                console.print(render_tree_outline(diagram))
        return 0
    except KeyboardInterrupt:
        console.print("\nInterrupted.")
        return 1
    except (
        DiagramFormatError,
        UnknownDiagramError,
        NavigationError,
        json.JSONDecodeError,
        OSError,
    ) as exc:
        console.print(f"\nError: {exc}", markup=False)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
