"""Diagram content schema and loading."""

from .schema import (
    DecisionTreeDiagram,
    Diagram,
    DiagramCatalog,
    DiagramKind,
    NodeContent,
    StepContent,
    UnknownDiagramError,
    Walkthrough,
)
from .loader import DiagramFormatError, load_catalog, parse_catalog, parse_diagram

__all__ = [
    "DecisionTreeDiagram",
    "Diagram",
    "DiagramCatalog",
    "DiagramFormatError",
    "DiagramKind",
    "NodeContent",
    "StepContent",
    "UnknownDiagramError",
    "Walkthrough",
    "load_catalog",
    "parse_catalog",
    "parse_diagram",
]
