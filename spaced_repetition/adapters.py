"""Boundary to the problem catalog.

The scheduler only ever sees :class:`ReviewableRef` values; it never writes
to the catalog.
"""
import uuid
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from catalog.models import Completion, Problem


@dataclass(frozen=True)
class ReviewableRef:
    id: uuid.UUID
    slug: Optional[str]
    name: str
    difficulty: str
    topic: Optional[dict] = None

    def as_dict(self):
        return {
            "id": str(self.id),
            "slug": self.slug,
            "name": self.name,
            "difficulty": self.difficulty,
            "topic": self.topic,
        }


def parse_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


class CatalogAdapter:
    def _to_ref(self, problem: Problem) -> ReviewableRef:
        topic = None
        if problem.topic_id is not None:
            topic = {"id": str(problem.topic.id), "name": problem.topic.name}
        return ReviewableRef(
            id=problem.id,
            slug=problem.slug,
            name=problem.name,
            difficulty=problem.difficulty,
            topic=topic,
        )

    def _problems(self):
        return Problem.objects.select_related("topic")

    def resolve(self, identifier) -> Optional[ReviewableRef]:
        """Look a reviewable up by id or slug."""
        if not identifier or not str(identifier).strip():
            return None
        problem_id = parse_uuid(identifier)
        if problem_id is not None:
            problem = self._problems().filter(pk=problem_id).first()
        else:
            problem = self._problems().filter(slug=str(identifier).strip()).first()
        return self._to_ref(problem) if problem else None

    def refs_for(self, reviewable_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, ReviewableRef]:
        ids = set(reviewable_ids)
        if not ids:
            return {}
        return {p.id: self._to_ref(p) for p in self._problems().filter(pk__in=ids)}

    def completed_refs(self, user_id) -> List[ReviewableRef]:
        completions = (
            Completion.objects.filter(user_id=user_id)
            .select_related("problem__topic")
            .order_by("-completed_at", "problem__name")
        )
        return [self._to_ref(c.problem) for c in completions]


catalog = CatalogAdapter()
