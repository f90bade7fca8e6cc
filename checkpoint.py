# checkpoint.py — durable crawl progress between execution cycles
"""
A crawl that runs out of its time budget hands a CheckpointSnapshot to a
CheckpointStore and stops. The next run with the same session key picks the
snapshot up and continues from the exact queue position.

At most one snapshot is kept per key.
"""
from __future__ import annotations

import hashlib
import json
import os
import re
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from errors import CheckpointError
from linkgraph import CrawlState, LinkNode

_REQUIRED = ("queue", "list", "counter")


@dataclass
class CheckpointSnapshot:
    queue: List[str] = field(default_factory=list)
    nodes: Dict[str, LinkNode] = field(default_factory=dict)
    counter: int = 0

    @classmethod
    def capture(cls, state: CrawlState) -> "CheckpointSnapshot":
        return cls(
            queue=list(state.queue),
            nodes={u: LinkNode(n.incoming, n.outgoing) for u, n in state.nodes.items()},
            counter=state.counter,
        )

    def restore(self, state: CrawlState) -> None:
        state.replace(self.queue, self.nodes, self.counter)

    def to_dict(self) -> dict:
        return {
            "queue": list(self.queue),
            "list": {u: n.to_dict() for u, n in self.nodes.items()},
            "counter": self.counter,
        }

    @classmethod
    def from_dict(cls, data) -> Optional["CheckpointSnapshot"]:
        """None unless every required field is present."""
        if not isinstance(data, dict) or any(data.get(k) is None for k in _REQUIRED):
            return None
        try:
            return cls(
                queue=[str(u) for u in data["queue"]],
                nodes={str(u): LinkNode.from_dict(n) for u, n in data["list"].items()},
                counter=int(data["counter"]),
            )
        except (TypeError, ValueError, AttributeError):
            return None


class CheckpointStore(Protocol):
    def fetch(self, key: str) -> Optional[CheckpointSnapshot]: ...
    def store(self, key: str, snapshot: CheckpointSnapshot) -> None: ...
    def delete(self, key: str) -> None: ...


class MemoryCheckpointStore:
    """Keeps serialized snapshots in a dict. Handy for tests and in-process resume."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def fetch(self, key: str) -> Optional[CheckpointSnapshot]:
        raw = self._data.get(key)
        if raw is None:
            return None
        return CheckpointSnapshot.from_dict(json.loads(raw))

    def store(self, key: str, snapshot: CheckpointSnapshot) -> None:
        try:
            self._data[key] = json.dumps(snapshot.to_dict())
        except (TypeError, ValueError) as exc:
            raise CheckpointError(f"cannot serialize checkpoint {key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class FileCheckpointStore:
    """One JSON file per session key inside `directory`."""

    def __init__(self, directory: str | os.PathLike) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        safe = re.sub(r"[^A-Za-z0-9._-]+", "_", key) or "checkpoint"
        # the digest keeps keys that sanitize alike ("a/b", "a_b") apart
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:8]
        return self.directory / f"{safe}-{digest}.json"

    def fetch(self, key: str) -> Optional[CheckpointSnapshot]:
        path = self.path_for(key)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError):
            # unreadable or half-written file: behave as if there was none
            return None
        return CheckpointSnapshot.from_dict(data)

    def store(self, key: str, snapshot: CheckpointSnapshot) -> None:
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=path.stem, suffix=".tmp")
        except OSError as exc:
            raise CheckpointError(f"cannot write checkpoint {path}: {exc}") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f)
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as exc:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass
            raise CheckpointError(f"cannot write checkpoint {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            pass
