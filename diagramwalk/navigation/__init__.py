"""Navigation engine for step-throughs and decision trees."""

from .content import StepContentResolver
from .errors import (
    InvalidStateError,
    MalformedTreeError,
    MissingContentError,
    NavigationError,
    OutOfRangeError,
)
from .stepper import HistoryStack, LinearStepper, StepStatus
from .tree import DecisionTree, TreeNavigator, TreeNode, TreeOption, TreePath

__all__ = [
    "DecisionTree",
    "HistoryStack",
    "InvalidStateError",
    "LinearStepper",
    "MalformedTreeError",
    "MissingContentError",
    "NavigationError",
    "OutOfRangeError",
    "StepContentResolver",
    "StepStatus",
    "TreeNavigator",
    "TreeNode",
    "TreeOption",
    "TreePath",
]
