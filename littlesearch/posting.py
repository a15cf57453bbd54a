"""
Occurrence and inverted index data structures.

An occurrence represents a keyword's presence in one document: the document
identifier and how many times the keyword occurs there. The index maps each
keyword to its occurrences, kept in descending order of frequency by
ordered insertion (binary search for the slot, then a single move).
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Occurrence:
    """
    A keyword's occurrence in a document.
    - document: document identifier (name or path)
    - frequency: number of times the keyword occurs in the document
    """

    document: str
    frequency: int

    def __repr__(self) -> str:
        return f"({self.document},{self.frequency})"


def find_insertion_point(occs: list[Occurrence]) -> tuple[int, list[int]]:
    """
    Binary search occs[0..n-2] (already in descending frequency order) for the
    slot of the last occurrence. Read-only.

    Returns (slot, midpoints) where midpoints lists every index probed.
    A probe with equal frequency ends the search and places the new
    occurrence right after it.
    """
    target = occs[-1].frequency
    lo = 0
    hi = len(occs) - 2
    midpoints: list[int] = []
    while lo < hi:
        mid = (lo + hi) // 2
        midpoints.append(mid)
        if occs[mid].frequency == target:
            return mid + 1, midpoints
        if target < occs[mid].frequency:
            lo = mid + 1
        else:
            hi = mid - 1

    if occs[lo].frequency > target:
        return lo + 1, midpoints
    return lo, midpoints


def insert_last_occurrence(occs: list[Occurrence]) -> list[int] | None:
    """
    Move the last occurrence of occs into its place in descending frequency
    order. occs[0..n-2] must already be in order.

    Returns the midpoints probed by the binary search, or None when occs has
    a single element. The midpoints are diagnostic only.
    """
    if len(occs) < 2:
        return None
    slot, midpoints = find_insertion_point(occs)
    if slot != len(occs) - 1:
        occs.insert(slot, occs.pop())
    return midpoints


class ReadWriteLock:
    """
    Single-writer / multiple-reader lock.
    Readers share access; a writer waits for active readers to drain and
    blocks new readers while it is waiting or writing.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class InvertedIndex:
    """
    Inverted index: map from keyword -> list of occurrences, in descending
    order of frequency. add_occurrence is the only way a list changes.
    """

    def __init__(self) -> None:
        self._index: dict[str, list[Occurrence]] = {}
        self._documents: set[str] = set()
        self.lock = ReadWriteLock()

    def add_occurrence(self, keyword: str, occurrence: Occurrence) -> list[int] | None:
        """
        Add an occurrence for a keyword, keeping its list in order.
        Returns the insertion midpoints (None for a new keyword).
        Caller must hold the write lock.
        """
        self._documents.add(occurrence.document)
        occs = self._index.get(keyword)
        if occs is None:
            self._index[keyword] = [occurrence]
            return None
        occs.append(occurrence)
        midpoints = insert_last_occurrence(occs)
        logger.debug("Inserted %r for %r, midpoints %s", occurrence, keyword, midpoints)
        return midpoints

    def get_postings(self, keyword: str) -> tuple[Occurrence, ...] | None:
        """
        Return a read-only snapshot of the occurrences for a keyword, or None
        if the keyword was never indexed.
        """
        occs = self._index.get(keyword)
        if occs is None:
            return None
        return tuple(occs)

    def has_document(self, document: str) -> bool:
        """True if any occurrence of document has been added."""
        return document in self._documents

    def documents(self) -> Iterator[str]:
        """Iterate over the documents that contributed keywords."""
        return iter(self._documents)

    def keywords(self) -> Iterator[str]:
        """Iterate over all keywords in the index."""
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, keyword: str) -> bool:
        return keyword in self._index

    def to_dict(self) -> dict[str, list[list]]:
        """Render as {keyword: [[document, frequency], ...]} for inspection."""
        with self.lock.read_locked():
            return {
                keyword: [[o.document, o.frequency] for o in occs]
                for keyword, occs in self._index.items()
            }
