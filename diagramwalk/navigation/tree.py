"""Decision tree navigation with breadcrumb path and backtracking."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from .content import StepContentResolver
from .errors import InvalidStateError, MalformedTreeError, OutOfRangeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeOption:
    label: str
    target: str


@dataclass(frozen=True)
class TreeNode:
    """Question node (has options) or terminal node (no options)."""

    id: str
    prompt: str = ""
    options: Tuple[TreeOption, ...] = field(default_factory=tuple)
    result: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", tuple(self.options))

    @property
    def is_terminal(self) -> bool:
        return not self.options

    @classmethod
    def question(cls, node_id: str, prompt: str, options: Iterable[Tuple[str, str]]) -> "TreeNode":
        return cls(
            id=node_id,
            prompt=prompt,
            options=tuple(TreeOption(label, target) for label, target in options),
        )

    @classmethod
    def terminal(cls, node_id: str, result: Any = None) -> "TreeNode":
        return cls(id=node_id, result=result)


class DecisionTree:
    """Validated, immutable node table with a single root."""

    def __init__(self, nodes: Mapping[str, TreeNode], root_id: str) -> None:
        if not nodes:
            raise MalformedTreeError("Decision tree has no nodes")
        for key, node in nodes.items():
            if key != node.id:
                raise MalformedTreeError(
                    f"Node table key {key!r} does not match node id {node.id!r}",
                    node_id=node.id,
                )
        if root_id not in nodes:
            raise MalformedTreeError(f"Root id {root_id!r} is not in the node table", node_id=root_id)

        for node in nodes.values():
            if node.options and node.result is not None:
                raise MalformedTreeError(
                    f"Node {node.id!r} has both options and a result",
                    node_id=node.id,
                )
            for option in node.options:
                if option.target not in nodes:
                    raise MalformedTreeError(
                        f"Option {option.label!r} of node {node.id!r} targets unknown node {option.target!r}",
                        node_id=node.id,
                    )

        self._nodes: Mapping[str, TreeNode] = MappingProxyType(dict(nodes))
        self.root_id = root_id

        unreachable = set(self._nodes) - self.reachable_ids()
        if unreachable:
            logger.warning(
                "Decision tree rooted at %r has unreachable nodes: %s",
                root_id,
                ", ".join(sorted(unreachable)),
            )

    @classmethod
    def from_nodes(cls, nodes: Iterable[TreeNode], root_id: str) -> "DecisionTree":
        table: Dict[str, TreeNode] = {}
        for node in nodes:
            if node.id in table:
                raise MalformedTreeError(f"Duplicate node id {node.id!r}", node_id=node.id)
            table[node.id] = node
        return cls(table, root_id)

    @property
    def nodes(self) -> Mapping[str, TreeNode]:
        return self._nodes

    @property
    def root(self) -> TreeNode:
        return self._nodes[self.root_id]

    def node(self, node_id: str) -> TreeNode:
        return self._nodes[node_id]

    def terminal_ids(self) -> List[str]:
        return [node.id for node in self._nodes.values() if node.is_terminal]

    def reachable_ids(self) -> Set[str]:
        seen: Set[str] = set()
        pending = [self.root_id]
        while pending:
            node_id = pending.pop()
            if node_id in seen:
                continue
            seen.add(node_id)
            pending.extend(option.target for option in self._nodes[node_id].options)
        return seen

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)


@dataclass(frozen=True)
class TreePath:
    """Node ids from the root to the current node."""

    ids: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.ids:
            raise ValueError("TreePath cannot be empty")

    @classmethod
    def at_root(cls, root_id: str) -> "TreePath":
        return cls((root_id,))

    @property
    def last(self) -> str:
        return self.ids[-1]

    def extend(self, node_id: str) -> "TreePath":
        return TreePath(self.ids + (node_id,))

    def parent(self) -> "TreePath":
        if len(self.ids) == 1:
            return self
        return TreePath(self.ids[:-1])

    def truncate(self, length: int) -> "TreePath":
        return TreePath(self.ids[:length])

    def __len__(self) -> int:
        return len(self.ids)


class TreeNavigator:
    """Walks a DecisionTree from its root, remembering the full path.

    Terminal nodes are dead ends for ``choose`` only; ``back``, ``back_to``
    and ``reset`` always work.
    """

    def __init__(self, tree: DecisionTree, content: Optional[StepContentResolver] = None) -> None:
        self._tree = tree
        self._content = content
        self._accept(tree.root_id)
        self._path = TreePath.at_root(tree.root_id)

    @property
    def tree(self) -> DecisionTree:
        return self._tree

    @property
    def path(self) -> Tuple[str, ...]:
        return self._path.ids

    @property
    def depth(self) -> int:
        return len(self._path) - 1

    @property
    def is_terminal(self) -> bool:
        return self.current().is_terminal

    @property
    def can_go_back(self) -> bool:
        return len(self._path) > 1

    def current(self) -> TreeNode:
        return self._tree.node(self._path.last)

    def breadcrumb(self) -> Tuple[TreeNode, ...]:
        return tuple(self._tree.node(node_id) for node_id in self._path.ids)

    def options(self) -> Tuple[TreeOption, ...]:
        return self.current().options

    def choices(self) -> List[str]:
        """Labels of the options taken along the current path."""
        labels: List[str] = []
        for parent_id, child_id in zip(self._path.ids, self._path.ids[1:]):
            for option in self._tree.node(parent_id).options:
                if option.target == child_id:
                    labels.append(option.label)
                    break
        return labels

    def choose(self, option_index: int) -> TreeNode:
        node = self.current()
        if node.is_terminal:
            raise InvalidStateError(
                f"Node {node.id!r} is terminal and has no options to choose from",
                node_id=node.id,
            )
        if isinstance(option_index, bool) or not isinstance(option_index, int):
            raise TypeError(f"option index must be an int, got {type(option_index).__name__}")
        if option_index < 0 or option_index >= len(node.options):
            raise OutOfRangeError(option_index, len(node.options), what="option")
        self._move(self._path.extend(node.options[option_index].target))
        return self.current()

    def back(self) -> TreeNode:
        if self.can_go_back:
            self._move(self._path.parent())
        return self.current()

    def back_to(self, depth: int) -> TreeNode:
        """Backtrack to the breadcrumb entry at ``depth`` (0 is the root)."""
        if isinstance(depth, bool) or not isinstance(depth, int):
            raise TypeError(f"depth must be an int, got {type(depth).__name__}")
        if depth < 0 or depth >= len(self._path):
            raise OutOfRangeError(depth, len(self._path), what="depth")
        if depth < len(self._path) - 1:
            self._move(self._path.truncate(depth + 1))
        return self.current()

    def reset(self) -> TreeNode:
        self._move(TreePath.at_root(self._tree.root_id))
        return self.current()

    def _accept(self, node_id: str) -> None:
        if self._content is not None:
            self._content.resolve(node_id)

    def _move(self, path: TreePath) -> None:
        self._accept(path.last)
        previous = self._path.last
        self._path = path
        logger.debug("node %s -> %s (depth %s)", previous, path.last, len(path) - 1)

    def __repr__(self) -> str:
        return f"TreeNavigator(root={self._tree.root_id!r}, current={self._path.last!r})"
