"""Live query results: the full document list plus what changed since the last push."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Protocol, Sequence, TypeVar

from wordflight_chat.domain.value_objects.enums import ChangeType


class Identified(Protocol):
    @property
    def id(self) -> str: ...


T = TypeVar("T", bound=Identified)


@dataclass(frozen=True, slots=True)
class DocumentChange(Generic[T]):
    type: ChangeType
    doc: T


@dataclass(frozen=True, slots=True)
class QuerySnapshot(Generic[T]):
    docs: list[T]
    changes: list[DocumentChange[T]] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.docs

    def added(self) -> list[T]:
        return [c.doc for c in self.changes if c.type == ChangeType.ADDED]


def diff_snapshot(previous: Sequence[T], current: Sequence[T]) -> QuerySnapshot[T]:
    """Build a snapshot of ``current`` with changes relative to ``previous``.

    Removals come first, then additions and modifications in result order.
    """
    before = {doc.id: doc for doc in previous}
    after_ids = {doc.id for doc in current}

    changes: list[DocumentChange[T]] = [
        DocumentChange(ChangeType.REMOVED, doc)
        for doc in previous
        if doc.id not in after_ids
    ]
    for doc in current:
        old = before.get(doc.id)
        if old is None:
            changes.append(DocumentChange(ChangeType.ADDED, doc))
        elif old != doc:
            changes.append(DocumentChange(ChangeType.MODIFIED, doc))
    return QuerySnapshot(docs=list(current), changes=changes)
