"""Reconciliation of owned sub-record collections.

Every parent write submits the full owned set. The linker diffs it against
what is stored, keyed by an internal key that callers treat as opaque:
members not resubmitted are deleted, members without a known key are created,
and members with a known key are updated in place. The resulting order is the
submission order.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar
from uuid import uuid4

from archivist.domain.record.model.value import SubRecord
from archivist.domain.schema.model.result import SubRecordDraft

logger = logging.getLogger(__name__)

S = TypeVar("S")  # submitted member
T = TypeVar("T")  # stored member


@dataclass(frozen=True)
class ReconcilePlan(Generic[T]):
    """What a reconciliation decided. ``applied`` is the new owned set, in order."""

    applied: list[T] = field(default_factory=list)
    created: list[T] = field(default_factory=list)
    updated: list[T] = field(default_factory=list)
    deleted: list[T] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.created or self.updated or self.deleted)


class SubRecordLinker(Generic[S, T]):
    """Generic diff routine, parameterized by key extraction and owner binding.

    Args:
        submitted_key: Key carried by a submitted member, or None for new ones.
        stored_key: Key of a stored member.
        bind: Builds the stored form of a submitted member for ``parent`` at
            ``position``; receives the matched stored member or None.
    """

    def __init__(
        self,
        submitted_key: Callable[[S], str | None],
        stored_key: Callable[[T], str],
        bind: Callable[[Any, S, int, T | None], T],
    ) -> None:
        self._submitted_key = submitted_key
        self._stored_key = stored_key
        self._bind = bind

    def reconcile(
        self,
        parent: Any,
        submitted: Sequence[S],
        existing: Sequence[T],
    ) -> ReconcilePlan[T]:
        remaining = {self._stored_key(member): member for member in existing}
        plan: ReconcilePlan[T] = ReconcilePlan()

        for position, member in enumerate(submitted):
            key = self._submitted_key(member)
            match = remaining.pop(key, None) if key is not None else None
            stored = self._bind(parent, member, position, match)
            plan.applied.append(stored)
            if match is None:
                plan.created.append(stored)
            elif stored != match:
                plan.updated.append(stored)

        plan.deleted.extend(remaining.values())
        return plan


def _bind_subrecord(collection: str) -> Callable[[Any, SubRecordDraft, int, SubRecord | None], SubRecord]:
    def bind(parent: Any, draft: SubRecordDraft, position: int, match: SubRecord | None) -> SubRecord:
        if match is None:
            return SubRecord(
                key=uuid4().hex,
                owner=parent.uri,
                collection=collection,
                position=position,
                data=draft.data,
            )
        if match.data == draft.data and match.position == position:
            return match
        version = match.version + 1 if match.data != draft.data else match.version
        return match.model_copy(update={"position": position, "data": draft.data, "version": version})

    return bind


def subrecord_linker(collection: str) -> SubRecordLinker[SubRecordDraft, SubRecord]:
    """Linker for one named collection of SubRecords."""
    return SubRecordLinker(
        submitted_key=lambda draft: draft.key,
        stored_key=lambda stored: stored.key,
        bind=_bind_subrecord(collection),
    )


def reconcile(
    parent: Any,
    collection: str,
    submitted: Sequence[SubRecordDraft],
    existing: Sequence[SubRecord],
) -> ReconcilePlan[SubRecord]:
    plan = subrecord_linker(collection).reconcile(parent, submitted, existing)
    logger.debug(
        "Reconciled %s on %s: created=%d updated=%d deleted=%d",
        collection,
        getattr(parent, "uri", parent),
        len(plan.created),
        len(plan.updated),
        len(plan.deleted),
    )
    return plan
