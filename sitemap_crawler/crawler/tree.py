"""
Rebuilds the discovery forest from the flat list of tree nodes.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Set

from .state import TreeNode


@dataclass
class TreeBranch:
    """A tree node with its children attached."""
    node: TreeNode
    children: List['TreeBranch'] = field(default_factory=list)

    @property
    def url(self) -> str:
        return self.node.url

    @property
    def label(self) -> str:
        return self.node.title or self.node.url


def build_tree(nodes: Iterable[TreeNode]) -> List[TreeBranch]:
    """
    Group nodes under their parents.

    Nodes are ordered by level (stable, so discovery order breaks ties).
    Every node is registered before any is attached, so a child never depends
    on its parent having been seen first. A node whose parent is unknown, or
    whose ancestor chain loops back to itself, becomes a root.
    """
    arena: Dict[str, TreeBranch] = {}
    ordered: List[TreeNode] = []

    for node in sorted(nodes, key=lambda n: n.level):
        if node.url in arena:
            continue
        arena[node.url] = TreeBranch(node)
        ordered.append(node)

    cyclic = _nodes_on_cycles(arena)
    roots: List[TreeBranch] = []

    for node in ordered:
        branch = arena[node.url]
        parent = node.parent
        if parent and parent != node.url and parent in arena and node.url not in cyclic:
            arena[parent].children.append(branch)
        else:
            roots.append(branch)

    return roots


def _nodes_on_cycles(arena: Dict[str, TreeBranch]) -> Set[str]:
    """
    URLs whose parent chain leads back to themselves.

    Each parent chain is walked once; nodes already resolved by an earlier
    walk end the current one.
    """
    cyclic: Set[str] = set()
    done: Set[str] = set()

    for start in arena:
        if start in done:
            continue

        path: List[str] = []
        on_path: Dict[str, int] = {}
        url = start
        while url in arena and url not in done:
            if url in on_path:
                cyclic.update(path[on_path[url]:])
                break
            on_path[url] = len(path)
            path.append(url)
            url = arena[url].node.parent

        done.update(path)

    return cyclic


def flatten(forest: Iterable[TreeBranch]) -> Iterator[TreeNode]:
    """Depth-first pre-order walk over a forest."""
    stack = list(reversed(list(forest)))
    while stack:
        branch = stack.pop()
        yield branch.node
        stack.extend(reversed(branch.children))
