"""Boundary to the document store that supplies training examples.

The store itself lives outside this package. It only has to hand back tagged
documents with precomputed sparse features; this module turns them into
labelled :class:`Example` values in chronological order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Iterator, Protocol, Sequence

from .linear_model import NEGATIVE_LABEL, POSITIVE_LABEL, Example


@dataclass(frozen=True)
class TaggedDocument:
    """A stored document with its tags and extracted features."""

    doc_id: str
    date: datetime
    tag_ids: frozenset[int]
    features: dict[int, float] = field(default_factory=dict)


class DocumentStore(Protocol):
    """Protocol for a date-indexed, tag-filterable document store."""

    def find_documents(
        self,
        tag_ids: Sequence[int],
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        limit: int = 0,
    ) -> Iterable[TaggedDocument]:
        """Return documents carrying all of ``tag_ids`` with ``from_date <= date < to_date``."""


class InMemoryDocumentStore:
    """Document store backed by a list, for tests and small corpora."""

    def __init__(self, documents: Iterable[TaggedDocument] = ()) -> None:
        self._documents = list(documents)

    def add(self, document: TaggedDocument) -> None:
        self._documents.append(document)

    def find_documents(
        self,
        tag_ids: Sequence[int],
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        limit: int = 0,
    ) -> list[TaggedDocument]:
        required = set(tag_ids)
        found: list[TaggedDocument] = []
        for document in self._documents:
            if not required <= document.tag_ids:
                continue
            if from_date is not None and document.date < from_date:
                continue
            if to_date is not None and document.date >= to_date:
                continue
            found.append(document)
            if limit and len(found) >= limit:
                break
        return found


def examples_from_documents(documents: Iterable[TaggedDocument], positive_tag: int) -> Iterator[Example]:
    """Yield examples ordered by document date.

    Documents tagged with ``positive_tag`` are positives; all others are
    negatives. Documents sharing a date keep their input order.
    """

    for document in sorted(documents, key=lambda doc: doc.date):
        label = POSITIVE_LABEL if positive_tag in document.tag_ids else NEGATIVE_LABEL
        yield Example(features=dict(document.features), label=label)
