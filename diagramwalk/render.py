"""Rich renderables for walkthroughs and decision trees."""

from __future__ import annotations

from typing import List, Optional

from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound
from rich.console import Group
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from .diagrams.schema import (
    DecisionTreeDiagram,
    DiagramCatalog,
    DiagramKind,
    NodeContent,
    StepContent,
    Walkthrough,
)
from .navigation import LinearStepper, StepStatus, TreeNavigator, TreeNode

BREADCRUMB_LABEL_WIDTH = 25
DEFAULT_STEP_COLOR = "cyan"
DEFAULT_RESULT_COLOR = "green"
QUESTION_COLOR = "#f59e0b"


def lexer_name_for(language: Optional[str]) -> str:
    """Pick a pygments lexer alias for a code hint, falling back to plain text."""
    if not language:
        return "text"
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        return "text"
    return lexer.aliases[0] if lexer.aliases else "text"


def truncate_label(text: str, width: int = BREADCRUMB_LABEL_WIDTH) -> str:
    if len(text) > width:
        return text[:width] + "..."
    return text


def position_label(stepper: LinearStepper) -> str:
    return f"Step {stepper.current() + 1}/{stepper.length}"


def render_step_badges(walkthrough: Walkthrough, stepper: LinearStepper) -> Text:
    text = Text()
    for index, step in enumerate(walkthrough.steps):
        if index:
            text.append(" ")
        status = stepper.status(index)
        if status is StepStatus.CURRENT:
            style = f"bold reverse {step.color or DEFAULT_STEP_COLOR}"
        elif status is StepStatus.COMPLETED:
            style = "green"
        else:
            style = "dim"
        text.append(f" {index + 1}. {step.title} ", style=style)
    return text


def render_progress(walkthrough: Walkthrough, stepper: LinearStepper, width: int = 40) -> Text:
    filled = round(stepper.progress() * width)
    color = walkthrough.steps[stepper.current()].color or DEFAULT_STEP_COLOR
    bar = Text("━" * filled, style=color)
    bar.append("━" * (width - filled), style="dim")
    bar.append(f"  {position_label(stepper)}", style="bold yellow")
    return bar


def render_step_panel(walkthrough: Walkthrough, stepper: LinearStepper) -> Panel:
    step: StepContent = stepper_content(walkthrough, stepper)
    color = step.color or DEFAULT_STEP_COLOR

    heading = Text(f"{stepper.current() + 1}. {step.title}", style=f"bold {color}")
    if step.subtitle:
        heading.append(f": {step.subtitle}", style=color)

    parts: List = [heading]
    if step.description:
        parts.append(Text(""))
        parts.append(Text(step.description))
    if step.code_hint:
        parts.append(Text(""))
        parts.append(
            Syntax(
                step.code_hint,
                lexer_name_for(step.language),
                theme="ansi_dark",
                word_wrap=True,
            )
        )
    if step.tooltip:
        parts.append(Text(""))
        parts.append(Text(step.tooltip, style="italic dim"))

    return Panel(
        Group(*parts),
        title=walkthrough.title,
        subtitle=position_label(stepper),
        border_style=color,
    )


def stepper_content(walkthrough: Walkthrough, stepper: LinearStepper) -> StepContent:
    return walkthrough.content().resolve(stepper.current())


def node_label(node: TreeNode, content: Optional[NodeContent] = None) -> str:
    if content is not None and content.text:
        return content.text
    if node.is_terminal:
        return str(node.result) if node.result is not None else node.id
    return node.prompt or node.id


def render_tree_breadcrumb(diagram: DecisionTreeDiagram, navigator: TreeNavigator) -> Text:
    resolver = diagram.content()
    text = Text("Path: ", style="bold")
    for position, node in enumerate(navigator.breadcrumb()):
        if position:
            text.append(" -> ", style="dim")
        content = resolver.resolve(node.id)
        label = truncate_label(node_label(node, content))
        if node.is_terminal:
            text.append(label, style=content.color or DEFAULT_RESULT_COLOR)
        elif position == navigator.depth:
            text.append(label, style="bold reverse cyan")
        else:
            text.append(label, style="dim")
    return text


def render_tree_panel(diagram: DecisionTreeDiagram, navigator: TreeNavigator) -> Panel:
    node = navigator.current()
    content = diagram.content().resolve(node.id)
    parts: List = []

    if node.is_terminal:
        color = content.color or DEFAULT_RESULT_COLOR
        parts.append(Text("Result:", style="dim"))
        parts.append(Text(node_label(node, content), style=f"bold {color}"))
    else:
        color = QUESTION_COLOR
        parts.append(Text(node_label(node, content), style=f"bold {color}"))
        parts.append(Text(""))
        for index, option in enumerate(node.options):
            parts.append(Text.assemble((f" [{index + 1}] ", "bold"), option.label))

    if content.detail:
        parts.append(Text(""))
        parts.append(Text(content.detail))
    if content.tooltip:
        parts.append(Text(""))
        parts.append(Text(content.tooltip, style="italic dim"))

    return Panel(
        Group(*parts),
        title=diagram.title,
        subtitle=f"Depth {navigator.depth}",
        border_style=color,
    )


def render_catalog_table(catalog: DiagramCatalog) -> Table:
    table = Table(title="Diagrams", show_lines=False, expand=False)
    table.add_column("ID", style="bold cyan", no_wrap=True)
    table.add_column("Kind", style="magenta")
    table.add_column("Title")
    table.add_column("Size", justify="right")
    for diagram in catalog:
        if diagram.kind is DiagramKind.WALKTHROUGH:
            size = f"{len(diagram.steps)} steps"
        else:
            size = f"{len(diagram.tree)} nodes"
        table.add_row(diagram.id, diagram.kind.value, diagram.title, size)
    return table


def render_walkthrough_outline(walkthrough: Walkthrough) -> Panel:
    lines = Text()
    for index, step in enumerate(walkthrough.steps):
        if index:
            lines.append("\n")
        lines.append(f"{index + 1}. ", style="bold")
        lines.append(step.title, style=step.color or DEFAULT_STEP_COLOR)
        if step.subtitle:
            lines.append(f": {step.subtitle}")
    return Panel(lines, title=walkthrough.title, border_style="magenta")


def render_tree_outline(diagram: DecisionTreeDiagram) -> Panel:
    resolver = diagram.content()
    lines: List[str] = []

    def walk(node_id: str, prefix: str, seen: tuple) -> None:
        node = diagram.tree.node(node_id)
        for index, option in enumerate(node.options):
            last = index == len(node.options) - 1
            branch = "└─ " if last else "├─ "
            target = diagram.tree.node(option.target)
            label = node_label(target, resolver.resolve(target.id))
            lines.append(f"{prefix}{branch}{option.label}: {label}")
            if option.target not in seen:
                walk(option.target, prefix + ("   " if last else "│  "), seen + (option.target,))

    root = diagram.tree.root
    lines.append(node_label(root, resolver.resolve(root.id)))
    walk(root.id, "", (root.id,))
    return Panel(Text("\n".join(lines)), title=diagram.title, border_style="magenta")


def walkthrough_to_markdown(walkthrough: Walkthrough) -> str:
    lines = [f"# {walkthrough.title}", ""]
    if walkthrough.description:
        lines.extend([walkthrough.description, ""])
    for index, step in enumerate(walkthrough.steps):
        heading = f"## Step {index + 1}: {step.title}"
        if step.subtitle:
            heading += f" ({step.subtitle})"
        lines.append(heading)
        lines.append("")
        if step.description:
            lines.extend([step.description, ""])
        if step.code_hint:
            language = lexer_name_for(step.language)
            fence = "" if language == "text" else language
            lines.extend([f"```{fence}", step.code_hint, "```", ""])
    return "\n".join(lines)


def tree_to_markdown(diagram: DecisionTreeDiagram) -> str:
    resolver = diagram.content()
    lines = [f"# {diagram.title}", ""]
    if diagram.description:
        lines.extend([diagram.description, ""])
    for node in diagram.tree.nodes.values():
        content = resolver.resolve(node.id)
        if node.is_terminal:
            lines.append(f"- **{node.id}** (result): {node_label(node, content)}")
            continue
        lines.append(f"- **{node.id}**: {node_label(node, content)}")
        for option in node.options:
            lines.append(f"  - {option.label} -> `{option.target}`")
    lines.append("")
    return "\n".join(lines)


def diagram_to_markdown(diagram) -> str:
    if diagram.kind is DiagramKind.WALKTHROUGH:
        return walkthrough_to_markdown(diagram)
    return tree_to_markdown(diagram)
