# linkgraph.py — per-URL link counters and the crawl work queue
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable

from scope import UrlScope


@dataclass
class LinkNode:
    incoming: int = 0
    outgoing: int = 0

    def to_dict(self) -> dict:
        return {"incoming": self.incoming, "outgoing": self.outgoing}

    @classmethod
    def from_dict(cls, data: dict) -> "LinkNode":
        return cls(int(data.get("incoming", 0)), int(data.get("outgoing", 0)))


@dataclass
class CrawlState:
    """Everything a crawl accumulates: pending queue, node mapping, visit counter."""

    queue: Deque[str] = field(default_factory=deque)
    nodes: Dict[str, LinkNode] = field(default_factory=dict)
    counter: int = 0

    @classmethod
    def seeded(cls, root: str) -> "CrawlState":
        return cls(queue=deque([root]), nodes={root: LinkNode()})

    def replace(self, queue: Iterable[str], nodes: Dict[str, LinkNode], counter: int) -> None:
        self.queue = deque(queue)
        self.nodes = dict(nodes)
        self.counter = counter

    def pop(self) -> str:
        return self.queue.popleft()


class LinkGraph:
    """Records source → target links into a CrawlState."""

    def __init__(self, state: CrawlState, scope: UrlScope) -> None:
        self.state = state
        self.scope = scope

    def record(self, source: str, target: str) -> bool:
        """
        Count one link. Returns True when `target` was seen for the first time
        (and has been queued). Out-of-scope targets are ignored.
        """
        if not self.scope.is_in_scope(target):
            return False

        nodes = self.state.nodes
        if source in nodes:
            nodes[source].outgoing += 1

        node = nodes.get(target)
        if node is not None:
            node.incoming += 1
            return False

        nodes[target] = LinkNode(incoming=1, outgoing=0)
        self.state.queue.append(target)
        return True
