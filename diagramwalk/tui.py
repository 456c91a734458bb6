from __future__ import annotations

from typing import List, Optional

import select
import sys
import termios
import tty

from rich.console import Console, RenderableType
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from .diagrams.schema import DecisionTreeDiagram, Diagram, DiagramKind, Walkthrough
from .navigation import LinearStepper, TreeNavigator
from .render import (
    render_progress,
    render_step_badges,
    render_step_panel,
    render_tree_breadcrumb,
    render_tree_panel,
)

DIGIT_KEYS = tuple("123456789")


def run_tui(diagram: Diagram, console: Optional[Console] = None) -> None:
    if diagram.kind is DiagramKind.WALKTHROUGH:
        tui: DiagramTUI = WalkthroughTUI(diagram, console=console)
    else:
        tui = DecisionTreeTUI(diagram, console=console)
    tui.run()


class DiagramTUI:
    """Keyboard loop shared by both diagram kinds.

    The loop only issues engine operations that are valid for what is on
    screen; engine errors are not caught here.
    """

    help_lines: List[str] = []

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self.status_message = ""
        self.overlay_title: Optional[str] = None
        self.overlay_lines: List[str] = []

    def run(self) -> None:
        with Live(self.render(), console=self.console, refresh_per_second=10, screen=True) as live:
            while True:
                key = self._get_key()
                if not key:
                    continue
                if key in ("q", "\x03"):
                    break
                handled = self.handle_key(key)
                if handled == "quit":
                    break
                live.update(self.render())

    # ===== Rendering =====

    def render(self) -> Layout:
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="main", ratio=1),
            Layout(name="trail", size=3),
            Layout(name="footer", size=3),
        )
        layout["header"].update(self._render_header())
        if self.overlay_title:
            layout["main"].update(
                Panel(Text("\n".join(self.overlay_lines)), title=self.overlay_title, border_style="magenta")
            )
        else:
            layout["main"].update(self._render_main())
        layout["trail"].update(Panel(self._render_trail(), border_style="yellow"))
        layout["footer"].update(self._render_footer())
        return layout

    def _render_header(self) -> Panel:
        raise NotImplementedError

    def _render_main(self) -> RenderableType:
        raise NotImplementedError

    def _render_trail(self) -> RenderableType:
        raise NotImplementedError

    def _footer_shortcuts(self) -> List[tuple]:
        raise NotImplementedError

    def _render_footer(self) -> Panel:
        shortcuts = Text()
        for key, label in self._footer_shortcuts() + [("r", "Reset"), ("?", "Help"), ("q", "Quit")]:
            shortcuts.append(f" [{key}] ", style="bold")
            shortcuts.append(f"{label} ", style="dim")
        if self.status_message:
            shortcuts.append("  |  ", style="dim")
            shortcuts.append(self.status_message, style="yellow")
        max_width = max(10, self.console.size.width - 4)
        shortcuts.truncate(max_width, overflow="ellipsis")
        return Panel(shortcuts, style="dim")

    # ===== Input Handling =====

    def handle_key(self, key: str) -> Optional[str]:
        key = self._normalize_key(key)
        if self.overlay_title:
            if key in ("ESC", "q", "?"):
                self._clear_overlay()
            return None
        self.status_message = ""
        if key == "?":
            self._set_overlay("Help", self.help_lines)
        elif key == "r":
            self.reset()
        else:
            self._handle_navigation_key(key)
        return None

    def _handle_navigation_key(self, key: str) -> None:
        raise NotImplementedError

    def reset(self) -> None:
        raise NotImplementedError

    def _get_key(self) -> str:
        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            ch = sys.stdin.read(1)
            if ch == "\x1b":
                seq = ch
                while True:
                    ready, _, _ = select.select([sys.stdin], [], [], 0.02)
                    if not ready:
                        break
                    nxt = sys.stdin.read(1)
                    seq += nxt
                    if nxt.isalpha() or nxt == "~":
                        break
                    if len(seq) >= 12:
                        break
                return seq
            return ch
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)

    def _normalize_key(self, key: str) -> str:
        if key.startswith("\x1b[") or key.startswith("\x1bO"):
            last = key[-1]
            if last == "A":
                return "UP"
            if last == "B":
                return "DOWN"
            if last == "C":
                return "RIGHT"
            if last == "D":
                return "LEFT"
            return "ESC"
        if key.startswith("\x1b"):
            return "ESC"
        if key in ("\x7f", "\b"):
            return "BACKSPACE"
        return key

    def _set_overlay(self, title: str, lines: List[str]) -> None:
        self.overlay_title = title
        self.overlay_lines = lines or ["(empty)"]

    def _clear_overlay(self) -> None:
        self.overlay_title = None
        self.overlay_lines = []


class WalkthroughTUI(DiagramTUI):
    help_lines = [
        "Navigation:",
        "  Right or l / Space - Next step",
        "  Left or h          - Back (previous position in history)",
        "  1-9                - Jump to step",
        "  g/G                - Jump to first/last step",
        "  r                  - Reset",
        "",
        "General:",
        "  ?                  - Toggle help",
        "  q                  - Quit",
    ]

    def __init__(self, walkthrough: Walkthrough, console: Optional[Console] = None) -> None:
        super().__init__(console=console)
        self.walkthrough = walkthrough
        self.stepper: LinearStepper = walkthrough.stepper()

    def _render_header(self) -> Panel:
        return Panel(render_progress(self.walkthrough, self.stepper), border_style="cyan")

    def _render_main(self) -> RenderableType:
        return render_step_panel(self.walkthrough, self.stepper)

    def _render_trail(self) -> RenderableType:
        text = render_step_badges(self.walkthrough, self.stepper)
        max_width = max(10, self.console.size.width - 4)
        text.truncate(max_width, overflow="ellipsis")
        return text

    def _footer_shortcuts(self) -> List[tuple]:
        return [("<-", "Back"), ("->", "Next"), ("1-9", "Jump")]

    def _handle_navigation_key(self, key: str) -> None:
        if key in ("l", "RIGHT", " "):
            if self.stepper.at_end:
                self.status_message = "Last step"
            self.stepper.advance()
        elif key in ("h", "LEFT", "BACKSPACE"):
            if not self.stepper.can_retreat:
                self.status_message = "No earlier steps in history"
            self.stepper.retreat()
        elif key == "g":
            self.stepper.jump_to(0)
        elif key == "G":
            self.stepper.jump_to(self.stepper.length - 1)
        elif key in DIGIT_KEYS:
            index = int(key) - 1
            if index < self.stepper.length:
                self.stepper.jump_to(index)

    def reset(self) -> None:
        self.stepper.reset()


class DecisionTreeTUI(DiagramTUI):
    help_lines = [
        "Navigation:",
        "  1-9                - Choose an option",
        "  Left/h/Backspace   - Back one level",
        "  r                  - Start over",
        "",
        "General:",
        "  ?                  - Toggle help",
        "  q                  - Quit",
    ]

    def __init__(self, diagram: DecisionTreeDiagram, console: Optional[Console] = None) -> None:
        super().__init__(console=console)
        self.diagram = diagram
        self.navigator: TreeNavigator = diagram.navigator()

    def _render_header(self) -> Panel:
        title = Text()
        title.append(self.diagram.title, style="bold cyan")
        title.append("  |  ", style="dim")
        title.append(f"Depth {self.navigator.depth}", style="bold yellow")
        return Panel(title, border_style="cyan")

    def _render_main(self) -> RenderableType:
        return render_tree_panel(self.diagram, self.navigator)

    def _render_trail(self) -> RenderableType:
        text = render_tree_breadcrumb(self.diagram, self.navigator)
        max_width = max(10, self.console.size.width - 4)
        text.truncate(max_width, overflow="ellipsis")
        return text

    def _footer_shortcuts(self) -> List[tuple]:
        return [("1-9", "Choose"), ("<-", "Back")]

    def _handle_navigation_key(self, key: str) -> None:
        if key in ("h", "LEFT", "BACKSPACE"):
            if not self.navigator.can_go_back:
                self.status_message = "Already at root"
            self.navigator.back()
        elif key in DIGIT_KEYS:
            if self.navigator.is_terminal:
                self.status_message = "Result reached: go back or reset"
                return
            index = int(key) - 1
            if index < len(self.navigator.options()):
                self.navigator.choose(index)

    def reset(self) -> None:
        self.navigator.reset()
