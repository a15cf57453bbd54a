import threading
import time
from dataclasses import FrozenInstanceError

import pytest

from littlesearch.posting import (
    InvertedIndex,
    Occurrence,
    ReadWriteLock,
    find_insertion_point,
    insert_last_occurrence,
)


def occs(*pairs):
    return [Occurrence(doc, freq) for doc, freq in pairs]


def test_insert_between():
    lst = occs(("d1", 9), ("d2", 7), ("d3", 3), ("d4", 5))
    midpoints = insert_last_occurrence(lst)
    assert lst == occs(("d1", 9), ("d2", 7), ("d4", 5), ("d3", 3))
    assert midpoints == [1]


def test_insert_after_equal_midpoint():
    lst = occs(("d1", 9), ("d2", 5), ("d3", 3), ("d4", 5))
    assert insert_last_occurrence(lst) == [1]
    assert lst == occs(("d1", 9), ("d2", 5), ("d4", 5), ("d3", 3))


def test_insert_at_front_and_back():
    lst = occs(("d1", 9), ("d2", 7), ("d3", 3), ("d4", 12))
    insert_last_occurrence(lst)
    assert [o.document for o in lst] == ["d4", "d1", "d2", "d3"]

    lst = occs(("d1", 9), ("d2", 7), ("d3", 3), ("d4", 1))
    insert_last_occurrence(lst)
    assert [o.document for o in lst] == ["d1", "d2", "d3", "d4"]


def test_find_insertion_point_is_read_only():
    lst = occs(("a", 10), ("b", 8), ("c", 6), ("d", 4), ("e", 2), ("f", 7))
    before = list(lst)
    slot, midpoints = find_insertion_point(lst)
    assert lst == before
    assert slot == 2
    assert midpoints == [2, 0]


def test_unprobed_equal_frequency_lands_before():
    # the equal entry at the final lo is never probed
    lst = occs(("a", 9), ("b", 5), ("c", 5))
    slot, midpoints = find_insertion_point(lst)
    assert midpoints == [0]
    assert slot == 1


def test_trace_for_short_lists():
    assert insert_last_occurrence(occs(("a", 3))) is None
    lst = occs(("a", 3), ("b", 4))
    assert insert_last_occurrence(lst) == []
    assert [o.document for o in lst] == ["b", "a"]


def test_index_add_occurrence_keeps_order():
    index = InvertedIndex()
    with index.lock.write_locked():
        assert index.add_occurrence("graph", Occurrence("d1", 2)) is None
        index.add_occurrence("graph", Occurrence("d2", 6))
        index.add_occurrence("graph", Occurrence("d3", 4))
    assert index.get_postings("graph") == tuple(occs(("d2", 6), ("d3", 4), ("d1", 2)))
    assert index.get_postings("tree") is None
    assert "graph" in index
    assert len(index) == 1
    assert list(index.keywords()) == ["graph"]
    assert index.to_dict() == {"graph": [["d2", 6], ["d3", 4], ["d1", 2]]}


def test_occurrence_repr():
    assert repr(Occurrence("doc.txt", 3)) == "(doc.txt,3)"


def test_readers_share_lock():
    lock = ReadWriteLock()
    inside = threading.Barrier(2, timeout=5)

    def reader():
        with lock.read_locked():
            inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)
    assert not any(t.is_alive() for t in threads)


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    events = []
    writer_in = threading.Event()

    def writer():
        with lock.write_locked():
            writer_in.set()
            time.sleep(0.05)
            events.append("write done")

    def reader():
        writer_in.wait(timeout=5)
        with lock.read_locked():
            events.append("read")

    w = threading.Thread(target=writer)
    r = threading.Thread(target=reader)
    w.start()
    r.start()
    w.join(timeout=5)
    r.join(timeout=5)
    assert events == ["write done", "read"]


def test_get_postings_is_a_snapshot():
    index = InvertedIndex()
    with index.lock.write_locked():
        index.add_occurrence("graph", Occurrence("d1", 2))
    postings = index.get_postings("graph")
    assert isinstance(postings, tuple)
    with pytest.raises(FrozenInstanceError):
        postings[0].frequency = 99
    with index.lock.write_locked():
        index.add_occurrence("graph", Occurrence("d2", 5))
    assert postings == (Occurrence("d1", 2),)
    assert index.has_document("d2")
    assert sorted(index.documents()) == ["d1", "d2"]
