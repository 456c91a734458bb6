"""Content models for step-through and decision tree diagrams."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Union

from diagramwalk.navigation import (
    DecisionTree,
    LinearStepper,
    StepContentResolver,
    TreeNavigator,
)


class DiagramKind(Enum):
    WALKTHROUGH = "walkthrough"
    DECISION_TREE = "decision_tree"


@dataclass
class StepContent:
    """One unit of a guided step-through."""

    title: str
    subtitle: Optional[str] = None
    description: str = ""
    code_hint: Optional[str] = None
    language: Optional[str] = None
    color: Optional[str] = None
    tooltip: Optional[str] = None


@dataclass
class NodeContent:
    """Display payload for a decision tree node."""

    text: str
    color: Optional[str] = None
    tooltip: Optional[str] = None
    detail: Optional[str] = None


@dataclass
class Walkthrough:
    """Linear sequence of steps."""

    id: str
    title: str
    steps: List[StepContent] = field(default_factory=list)
    start: int = 0
    description: str = ""
    kind: DiagramKind = field(init=False, default=DiagramKind.WALKTHROUGH)

    def content(self) -> StepContentResolver:
        return StepContentResolver(dict(enumerate(self.steps)))

    def stepper(self) -> LinearStepper:
        """Fresh stepper with its own history, bound to this walkthrough's steps."""
        return LinearStepper(len(self.steps), start=self.start, content=self.content())


@dataclass
class DecisionTreeDiagram:
    """Branching question/answer diagram."""

    id: str
    title: str
    tree: DecisionTree
    nodes: Dict[str, NodeContent] = field(default_factory=dict)
    description: str = ""
    kind: DiagramKind = field(init=False, default=DiagramKind.DECISION_TREE)

    def __post_init__(self) -> None:
        self.content().require(self.tree.nodes)

    def content(self) -> StepContentResolver:
        return StepContentResolver(self.nodes)

    def navigator(self) -> TreeNavigator:
        return TreeNavigator(self.tree, content=self.content())


Diagram = Union[Walkthrough, DecisionTreeDiagram]


class UnknownDiagramError(LookupError):
    """No diagram with the requested id exists in the catalog."""

    def __init__(self, diagram_id: str, known: List[str]) -> None:
        self.diagram_id = diagram_id
        self.known = known
        listed = ", ".join(known) or "none"
        super().__init__(f"Unknown diagram {diagram_id!r} (known: {listed})")


class DiagramCatalog:
    """Ordered collection of diagrams keyed by id."""

    def __init__(self, diagrams: Optional[List[Diagram]] = None) -> None:
        self._diagrams: Dict[str, Diagram] = {}
        for diagram in diagrams or []:
            self.add(diagram)

    def add(self, diagram: Diagram) -> None:
        if diagram.id in self._diagrams:
            raise ValueError(f"Duplicate diagram id: {diagram.id}")
        self._diagrams[diagram.id] = diagram

    def get(self, diagram_id: str) -> Diagram:
        try:
            return self._diagrams[diagram_id]
        except KeyError:
            raise UnknownDiagramError(diagram_id, self.ids()) from None

    def ids(self) -> List[str]:
        return list(self._diagrams)

    def __iter__(self) -> Iterator[Diagram]:
        return iter(self._diagrams.values())

    def __len__(self) -> int:
        return len(self._diagrams)

    def __contains__(self, diagram_id: object) -> bool:
        return diagram_id in self._diagrams
