"""
Storage backends for the entity store.

Services only talk to a Repository, so the same business rules run against
PostgreSQL/SQLite (SqlRepository) and against plain dicts (MemoryRepository).
Records returned by MemoryRepository are detached copies: callers must pass a
changed record back through save() for the change to persist.
"""
import copy
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import case, func, update
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError
from core.logger import logger

ModelT = TypeVar("ModelT")


class Repository(ABC):
    """CRUD over SQLAlchemy model classes."""

    @abstractmethod
    def get(self, model: Type[ModelT], record_id: Any) -> Optional[ModelT]:
        """Return the record with this primary key, or None."""

    @abstractmethod
    def list(
        self,
        model: Type[ModelT],
        order_by: Optional[Sequence[str]] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[ModelT]:
        """All records, in insertion order unless order_by names columns."""

    @abstractmethod
    def filter_by(self, model: Type[ModelT], **criteria: Any) -> List[ModelT]:
        """Records whose columns equal every given value."""

    def find_one(self, model: Type[ModelT], **criteria: Any) -> Optional[ModelT]:
        rows = self.filter_by(model, **criteria)
        return rows[0] if rows else None

    def count(self, model: Type[ModelT], **criteria: Any) -> int:
        return len(self.filter_by(model, **criteria))

    @abstractmethod
    def add(self, instance: ModelT) -> ModelT:
        """Insert a new record. Raises ConflictError on a duplicate key."""

    @abstractmethod
    def save(self, instance: ModelT) -> ModelT:
        """Persist changes to an existing record."""

    @abstractmethod
    def delete(self, instance: Any) -> None:
        """Remove a record."""

    @abstractmethod
    def increment(
        self,
        model: Type[ModelT],
        record_id: Any,
        field: str,
        delta: int,
        minimum: Optional[int] = None,
    ) -> bool:
        """
        Add delta to a numeric column in place, floored at minimum.

        Returns False when no record has this primary key.
        """

    @abstractmethod
    def transaction(self):
        """Context manager: everything inside commits together or not at all."""


# ============================================================================
# SQLAlchemy backend
# ============================================================================

class SqlRepository(Repository):
    """Repository over a SQLAlchemy session. The session owner commits."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, model, record_id):
        if record_id is None:
            return None
        return self.session.get(model, record_id)

    def list(self, model, order_by=None, descending=False, limit=None):
        query = self.session.query(model)
        for name in order_by or ():
            column = getattr(model, name)
            query = query.order_by(column.desc() if descending else column.asc())
        if order_by is None:
            for column in sa_inspect(model).primary_key:
                query = query.order_by(column.asc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def filter_by(self, model, **criteria):
        return self.session.query(model).filter_by(**criteria).all()

    def count(self, model, **criteria):
        return self.session.query(model).filter_by(**criteria).count()

    def add(self, instance):
        self.session.add(instance)
        self._flush(instance)
        return instance

    def save(self, instance):
        self.session.add(instance)
        self._flush(instance)
        return instance

    def delete(self, instance):
        self.session.delete(instance)
        self._flush(instance)

    def increment(self, model, record_id, field, delta, minimum=None):
        if record_id is None:
            return False
        column = getattr(model, field)
        value = func.coalesce(column, 0) + delta
        if minimum is not None:
            value = case((value < minimum, minimum), else_=value)
        pk = sa_inspect(model).primary_key[0]

        # Single UPDATE so concurrent writers cannot overwrite each other's delta
        self.session.flush()
        result = self.session.execute(
            update(model)
            .where(pk == record_id)
            .values({column: value})
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return False
        self.session.get(model, record_id, populate_existing=True)
        return True

    def _flush(self, instance):
        try:
            self.session.flush()
        except IntegrityError as e:
            logger.warning(f"Integrity error on {type(instance).__name__}: {e.orig}")
            raise ConflictError(f"{type(instance).__name__} violates a uniqueness constraint")

    @contextmanager
    def transaction(self) -> Iterator[None]:
        # Savepoint: a failure undoes only this unit, the request session stays usable
        with self.session.begin_nested():
            yield
            self.session.flush()


# ============================================================================
# In-memory backend
# ============================================================================

class MemoryRepository(Repository):
    """Repository that stores column values in dicts. Used by tests and tooling."""

    def __init__(self):
        self._tables: Dict[type, Dict[Any, Dict[str, Any]]] = defaultdict(dict)
        self._sequences: Dict[type, int] = defaultdict(int)
        self._depth = 0

    @staticmethod
    def _columns(model) -> Dict[str, Any]:
        mapper = sa_inspect(model)
        return {attr.key: attr.columns[0] for attr in mapper.column_attrs}

    @staticmethod
    def _pk_name(model) -> str:
        mapper = sa_inspect(model)
        return mapper.get_property_by_column(mapper.primary_key[0]).key

    def _to_row(self, instance) -> Dict[str, Any]:
        return {
            key: copy.deepcopy(getattr(instance, key, None))
            for key in self._columns(type(instance))
        }

    @staticmethod
    def _from_row(model, row: Dict[str, Any]):
        return model(**copy.deepcopy(row))

    def _check_unique(self, model, row: Dict[str, Any], pk: Any) -> None:
        for key, column in self._columns(model).items():
            if not column.unique or row.get(key) is None:
                continue
            for other_pk, other in self._tables[model].items():
                if other_pk != pk and other.get(key) == row[key]:
                    raise ConflictError(f"{model.__name__} with {key} {row[key]} already exists", field=key)

    def get(self, model, record_id):
        row = self._tables[model].get(record_id)
        return self._from_row(model, row) if row is not None else None

    def list(self, model, order_by=None, descending=False, limit=None):
        rows = list(self._tables[model].values())
        if order_by:
            rows.sort(key=lambda r: tuple(r[name] for name in order_by), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return [self._from_row(model, r) for r in rows]

    def filter_by(self, model, **criteria):
        return [
            self._from_row(model, row)
            for row in self._tables[model].values()
            if all(row.get(k) == v for k, v in criteria.items())
        ]

    def add(self, instance):
        model = type(instance)
        pk_name = self._pk_name(model)
        columns = self._columns(model)

        if getattr(instance, pk_name) is None:
            self._sequences[model] += 1
            setattr(instance, pk_name, self._sequences[model])

        # Column defaults normally applied by SQLAlchemy on INSERT
        for key, column in columns.items():
            if getattr(instance, key, None) is None and column.default is not None:
                default = column.default.arg
                setattr(instance, key, default(None) if callable(default) else default)

        pk = getattr(instance, pk_name)
        if pk in self._tables[model]:
            raise ConflictError(f"{model.__name__} with ID {pk} already exists", field=pk_name)
        row = self._to_row(instance)
        self._check_unique(model, row, pk)
        self._tables[model][pk] = row
        return instance

    def save(self, instance):
        model = type(instance)
        pk = getattr(instance, self._pk_name(model))
        if pk not in self._tables[model]:
            return self.add(instance)
        row = self._to_row(instance)
        self._check_unique(model, row, pk)
        self._tables[model][pk] = row
        return instance

    def increment(self, model, record_id, field, delta, minimum=None):
        row = self._tables[model].get(record_id)
        if row is None:
            return False
        value = (row.get(field) or 0) + delta
        row[field] = value if minimum is None else max(value, minimum)
        return True

    def delete(self, instance):
        model = type(instance)
        self._tables[model].pop(getattr(instance, self._pk_name(model)), None)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        outermost = self._depth == 0
        if outermost:
            snapshot = copy.deepcopy(self._tables)
            sequences = dict(self._sequences)
        self._depth += 1
        try:
            yield
        except Exception:
            if outermost:
                self._tables = snapshot
                self._sequences = defaultdict(int, sequences)
            raise
        finally:
            self._depth -= 1
