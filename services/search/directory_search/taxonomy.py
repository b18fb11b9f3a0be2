from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple


class TaxonomyTree:
    """Parent/child map over taxonomy node ids.

    Answers "does a record tagged with these ids belong to node T, including
    T's descendants". Nodes the tree does not know about expand to themselves,
    so an empty tree behaves as a flat taxonomy (exact match only).
    """

    def __init__(self, parents: Optional[Dict[str, Optional[str]]] = None):
        self._children: Dict[str, List[str]] = {}
        self._nodes = set()
        for node, parent in (parents or {}).items():
            self._nodes.add(str(node))
            if parent is not None:
                self._nodes.add(str(parent))
                self._children.setdefault(str(parent), []).append(str(node))
        self._cache: Dict[str, FrozenSet[str]] = {}

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, Optional[str]]]) -> "TaxonomyTree":
        return cls({str(node): (str(parent) if parent is not None else None) for node, parent in pairs})

    def expand(self, node_id: str) -> FrozenSet[str]:
        """Return node_id plus every descendant id."""
        node_id = str(node_id)
        if node_id not in self._nodes:
            # unknown ids expand to themselves and stay out of the cache
            return frozenset((node_id,))
        if node_id in self._cache:
            return self._cache[node_id]

        seen = {node_id}
        stack = [node_id]
        while stack:
            for child in self._children.get(stack.pop(), ()):
                # guards against cycles in badly maintained data
                if child not in seen:
                    seen.add(child)
                    stack.append(child)

        result = frozenset(seen)
        self._cache[node_id] = result
        return result

    def contains(self, node_id: str, ids: Iterable[str]) -> bool:
        expanded = self.expand(node_id)
        return any(i in expanded for i in ids)
