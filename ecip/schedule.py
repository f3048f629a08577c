"""Fixed binary-tree merge schedule.

The merge order is part of the reproducibility contract:
1. Leaves pair input points adjacently in input order: (0,1), (2,3), ...
   An odd tail point forms a single-point leaf.
2. Nodes are merged level by level, again pairing adjacent nodes. An odd node
   at the end of a level is promoted unchanged to the next level.

The shape depends only on the number of points. Both passes of a run iterate
MergeSchedule.walk(), so inversion sites are enumerated in the same order.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Leaf:
    """Leaf node over one or two adjacent input points."""
    node: int
    points: Tuple[int, ...]


@dataclass(frozen=True)
class Merge:
    """Internal node combining two child nodes."""
    node: int
    level: int
    left: int
    right: int


Step = Union[Leaf, Merge]


@dataclass
class MergeSchedule:
    """Merge tree over n_points input points.

    Node ids: leaves are 0..len(leaves)-1 in input order, merges follow in
    execution order. root is None for an empty input.
    """
    n_points: int
    leaves: List[Leaf] = field(default_factory=list, init=False)
    merges: List[Merge] = field(default_factory=list, init=False)
    root: Optional[int] = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.n_points < 0:
            raise ValueError(f"n_points must be non-negative, got {self.n_points}")

        for start in range(0, self.n_points, 2):
            points = tuple(range(start, min(start + 2, self.n_points)))
            self.leaves.append(Leaf(node=len(self.leaves), points=points))

        current = [leaf.node for leaf in self.leaves]
        next_id = len(current)
        level = 1
        while len(current) > 1:
            promoted = []
            for j in range(0, len(current) - 1, 2):
                self.merges.append(Merge(next_id, level, current[j], current[j + 1]))
                promoted.append(next_id)
                next_id += 1
            if len(current) % 2 == 1:
                promoted.append(current[-1])
            current = promoted
            level += 1

        self.root = current[0] if current else None

    @property
    def n_nodes(self) -> int:
        return len(self.leaves) + len(self.merges)

    @property
    def depth(self) -> int:
        """Number of merge levels above the leaves."""
        return self.merges[-1].level if self.merges else 0

    def walk(self) -> Iterator[Step]:
        """The traversal order shared by pass 1 and pass 2."""
        yield from self.leaves
        yield from self.merges
