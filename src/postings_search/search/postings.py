"""Postings lists and the merge-based intersection used by AND queries."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import overload


@dataclass(frozen=True, eq=False)
class PostingsList(Sequence[int]):
    """Strictly ascending, duplicate-free document ids for one term.

    Compares equal to any non-string sequence holding the same ids, so
    ``index["cat"] == [0, 2]`` holds.
    """

    doc_ids: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        ids = self.doc_ids
        for previous, current in zip(ids, ids[1:]):
            if current <= previous:
                raise ValueError(f"postings must be strictly ascending, got {previous} before {current}")

    @classmethod
    def from_iterable(cls, doc_ids: Iterable[int]) -> PostingsList:
        """Build a postings list from ids in any order, dropping duplicates."""
        return cls(tuple(sorted(set(doc_ids))))

    @overload
    def __getitem__(self, index: int) -> int: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[int, ...]: ...

    def __getitem__(self, index):
        return self.doc_ids[index]

    def __len__(self) -> int:
        return len(self.doc_ids)

    def __iter__(self) -> Iterator[int]:
        return iter(self.doc_ids)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PostingsList):
            return self.doc_ids == other.doc_ids
        if isinstance(other, Sequence) and not isinstance(other, (str, bytes, bytearray)):
            return len(other) == len(self.doc_ids) and all(a == b for a, b in zip(self.doc_ids, other))
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.doc_ids)

    def __contains__(self, doc_id: object) -> bool:
        if not isinstance(doc_id, int):
            return False
        idx = bisect_left(self.doc_ids, doc_id)
        return idx < len(self.doc_ids) and self.doc_ids[idx] == doc_id

    def intersect(self, other: Sequence[int]) -> PostingsList:
        return PostingsList(tuple(intersect(self.doc_ids, other)))

    def to_list(self) -> list[int]:
        return list(self.doc_ids)


class PostingsBuilder:
    """Accumulates ids for one term while an index is being built.

    Ids normally arrive in ascending order, so the common case is an append;
    out-of-order ids fall back to a binary-search insert.
    """

    __slots__ = ("_doc_ids",)

    def __init__(self) -> None:
        self._doc_ids: list[int] = []

    def add(self, doc_id: int) -> bool:
        """Insert ``doc_id`` keeping the ids sorted; return False for a duplicate."""
        ids = self._doc_ids
        if not ids or doc_id > ids[-1]:
            ids.append(doc_id)
            return True
        idx = bisect_left(ids, doc_id)
        if idx < len(ids) and ids[idx] == doc_id:
            return False
        ids.insert(idx, doc_id)
        return True

    def __len__(self) -> int:
        return len(self._doc_ids)

    def build(self) -> PostingsList:
        return PostingsList(tuple(self._doc_ids))


def intersect(left: Sequence[int], right: Sequence[int]) -> list[int]:
    """Intersect two ascending, duplicate-free id sequences in O(len(left) + len(right)).

    Two cursors advance in lock-step: equal ids are emitted and both cursors
    move, otherwise only the cursor on the smaller id moves. The output is
    ascending and duplicate-free because both inputs are.
    """

    result: list[int] = []
    i = j = 0
    left_len, right_len = len(left), len(right)
    while i < left_len and j < right_len:
        a, b = left[i], right[j]
        if a == b:
            result.append(a)
            i += 1
            j += 1
        elif a < b:
            i += 1
        else:
            j += 1
    return result


def intersect_all(postings: Iterable[Sequence[int]]) -> list[int]:
    """AND together any number of postings lists, shortest first.

    Returns an empty list when no postings are given and a copy of the only
    list when a single one is given.
    """

    ordered = sorted(postings, key=len)
    if not ordered:
        return []
    result = list(ordered[0])
    for doc_ids in ordered[1:]:
        if not result:
            break
        result = intersect(result, doc_ids)
    return result
