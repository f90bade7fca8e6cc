import json

import pytest

from checkpoint import CheckpointSnapshot, FileCheckpointStore, MemoryCheckpointStore
from errors import CheckpointError
from linkgraph import CrawlState, LinkNode


def _snapshot():
    return CheckpointSnapshot(
        queue=["a", "b"],
        nodes={"a": LinkNode(0, 1), "b": LinkNode(1, 0)},
        counter=2,
    )


@pytest.mark.parametrize("make_store", [
    lambda tmp: MemoryCheckpointStore(),
    lambda tmp: FileCheckpointStore(tmp / "ckpt"),
])
def test_store_fetch_delete(tmp_path, make_store):
    store = make_store(tmp_path)
    assert store.fetch("site") is None

    store.store("site", _snapshot())
    got = store.fetch("site")
    assert got == _snapshot()

    store.delete("site")
    assert store.fetch("site") is None
    store.delete("site")            # deleting twice is fine


def test_one_snapshot_per_key(tmp_path):
    store = FileCheckpointStore(tmp_path)
    store.store("site", _snapshot())
    newer = CheckpointSnapshot(queue=["c"], nodes={"c": LinkNode(1, 0)}, counter=9)
    store.store("site", newer)
    assert store.fetch("site") == newer
    assert store.fetch("other") is None
    assert [p.name for p in tmp_path.iterdir()] == [store.path_for("site").name]


def test_restore_replaces_state():
    state = CrawlState.seeded("root")
    _snapshot().restore(state)
    assert list(state.queue) == ["a", "b"]
    assert state.nodes == {"a": LinkNode(0, 1), "b": LinkNode(1, 0)}
    assert state.counter == 2


def test_capture_is_a_copy():
    state = CrawlState.seeded("root")
    snap = CheckpointSnapshot.capture(state)
    state.nodes["root"].incoming = 5
    state.queue.append("x")
    assert snap.nodes["root"] == LinkNode(0, 0)
    assert snap.queue == ["root"]


@pytest.mark.parametrize("data", [
    {"queue": ["a"], "list": {"a": {"incoming": 0, "outgoing": 0}}},
    {"queue": ["a"], "counter": 1},
    {"list": {}, "counter": 1},
    {"queue": None, "list": {}, "counter": 1},
    {"queue": ["a"], "list": ["not", "a", "mapping"], "counter": 1},
    [],
])
def test_partial_snapshots_are_ignored(data):
    assert CheckpointSnapshot.from_dict(data) is None


def test_unreadable_file_is_treated_as_absent(tmp_path):
    store = FileCheckpointStore(tmp_path)
    store.path_for("site").write_text("{not json", encoding="utf-8")
    assert store.fetch("site") is None

    store.path_for("site").write_text(json.dumps({"queue": []}), encoding="utf-8")
    assert store.fetch("site") is None


def test_keys_are_made_filename_safe(tmp_path):
    store = FileCheckpointStore(tmp_path)
    assert store.path_for("http://example.com/").parent == tmp_path
    assert "/" not in store.path_for("http://example.com/").name


def test_write_failure_raises_checkpoint_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    store = FileCheckpointStore(blocker / "sub")
    with pytest.raises(CheckpointError):
        store.store("site", _snapshot())


def test_keys_that_sanitize_alike_get_separate_files(tmp_path):
    store = FileCheckpointStore(tmp_path)
    assert store.path_for("a/b") != store.path_for("a_b")

    store.store("a/b", _snapshot())
    assert store.fetch("a_b") is None
    assert store.fetch("a/b") == _snapshot()


def test_failed_write_leaves_no_temp_file(tmp_path):
    store = FileCheckpointStore(tmp_path)
    bad = CheckpointSnapshot(queue=[], nodes={}, counter=object())
    with pytest.raises(CheckpointError):
        store.store("site", bad)
    assert list(tmp_path.iterdir()) == []
