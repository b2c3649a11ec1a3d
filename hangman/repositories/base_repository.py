from abc import ABC
from collections.abc import Callable
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel

from hangman.core.error import DomainErrorCode, HangmanDomainError

T = TypeVar("T", bound=BaseModel)

Predicate = Callable[[T], bool]


class BaseRepository(Generic[T], ABC):
    """In-memory repository keyed by record id.

    Lookups return ``None`` for a missing record; only ``filter_one_or_raise``
    turns absence into a domain error.
    """

    def __init__(
        self,
        model_class: type[T],
        not_found_error_code: DomainErrorCode,
    ):
        self.model_class = model_class
        self.not_found_error_code = not_found_error_code
        self._records: dict[UUID, T] = {}

    def get_by_uuid(self, uuid: UUID) -> T | None:
        return self._records.get(uuid)

    def create(self, entity: T) -> T:
        self._records[entity.id] = entity  # type: ignore[attr-defined]
        return entity

    def update(self, uuid: UUID, **fields: Any) -> T | None:
        entity = self._records.get(uuid)
        if entity is None:
            return None

        known = {
            key: value
            for key, value in fields.items()
            if key in self.model_class.model_fields and key != "id"
        }
        updated = entity.model_copy(update=known)
        self._records[uuid] = updated
        return updated

    def delete(self, uuid: UUID) -> bool:
        return self._records.pop(uuid, None) is not None

    def _matches(self, entity: T, filters: tuple[Predicate, ...], **kwargs: Any) -> bool:
        for key, value in kwargs.items():
            if getattr(entity, key, None) != value:
                return False
        return all(condition(entity) for condition in filters)

    def filter(
        self,
        *filters: Predicate,
        offset: int | None = None,
        limit: int | None = None,
        **kwargs: Any,
    ) -> list[T]:
        result = [
            entity
            for entity in self._records.values()
            if self._matches(entity, filters, **kwargs)
        ]

        if offset is not None:
            result = result[offset:]
        if limit is not None:
            result = result[:limit]

        return result

    def filter_one(self, *filters: Predicate, **kwargs: Any) -> T | None:
        for entity in self._records.values():
            if self._matches(entity, filters, **kwargs):
                return entity
        return None

    def filter_one_or_raise(self, *filters: Predicate, **kwargs: Any) -> T:
        result = self.filter_one(*filters, **kwargs)
        if result is None:
            filter_details = {key: str(value) for key, value in kwargs.items()}
            raise HangmanDomainError(
                code=self.not_found_error_code,
                message=f"{self.model_class.__name__} not found",
                details={
                    "model": self.model_class.__name__,
                    "conditions": filter_details,
                },
            )
        return result

    def count(self, *filters: Predicate, **kwargs: Any) -> int:
        return len(self.filter(*filters, **kwargs))
