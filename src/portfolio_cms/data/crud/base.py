"""Generic per-model data access ("delegate").

Every entity gets the same surface: unique and first/many lookups, counts,
single and bulk writes, upserts, aggregates and group-by summaries. Filters
are plain equality on column names, with two conveniences:

- ``None`` matches SQL ``NULL``.
- A list, tuple or set matches any of its values (``IN``).

Ordering takes column names, and a leading ``-`` sorts descending.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import (
    ColumnElement,
    Select,
    UniqueConstraint,
    delete,
    func,
    inspect,
    select,
    update,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portfolio_cms.data.db import Base
from portfolio_cms.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

OrderBy = str | Sequence[str] | None

_NUMERIC_TYPES = (int, float, Decimal)


class Delegate(Generic[ModelT]):
    """CRUD, aggregate and group-by operations for one ORM model.

    Subclasses set :attr:`model` and may add entity-specific lookups.
    Writes are flushed immediately so database constraint violations
    surface as :class:`ConflictError` inside the caller's transaction.
    """

    model: ClassVar[type[Base]]

    def __init__(self, session: Session) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------

    @property
    def _name(self) -> str:
        return self.model.__name__

    def _columns(self) -> dict[str, Any]:
        return {attr.key: attr for attr in inspect(self.model).column_attrs}

    def _column(self, name: str) -> Any:
        if name not in self._columns():
            raise ValidationError(f"Unknown field '{name}' for {self._name}")
        return getattr(self.model, name)

    def _unique_key_sets(self) -> list[frozenset[str]]:
        """Column-name sets that identify at most one row."""
        table = self.model.__table__
        keys = [frozenset(col.key for col in table.primary_key.columns)]
        for col in table.columns:
            if col.unique:
                keys.append(frozenset({col.key}))
        for constraint in table.constraints:
            if isinstance(constraint, UniqueConstraint):
                keys.append(frozenset(c.key for c in constraint.columns))
        return keys

    def _check_writable(self, data: Mapping[str, Any]) -> None:
        mapper = inspect(self.model)
        writable = set(self._columns()) | set(mapper.relationships.keys())
        unknown = sorted(set(data) - writable)
        if unknown:
            raise ValidationError(f"Unknown field(s) for {self._name}: {', '.join(unknown)}")

    def _conditions(self, where: Mapping[str, Any] | None) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        for name, value in (where or {}).items():
            column = self._column(name)
            if value is None:
                conditions.append(column.is_(None))
            elif isinstance(value, list | tuple | set | frozenset):
                conditions.append(column.in_(list(value)))
            else:
                conditions.append(column == value)
        return conditions

    def _order_clauses(self, order_by: OrderBy) -> list[Any]:
        if order_by is None:
            return []
        names = [order_by] if isinstance(order_by, str) else list(order_by)
        clauses = []
        for name in names:
            descending = name.startswith("-")
            column = self._column(name.lstrip("-"))
            clauses.append(column.desc() if descending else column.asc())
        return clauses

    def _numeric_column(self, name: str) -> Any:
        column = self._column(name)
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            python_type = None
        if python_type not in _NUMERIC_TYPES:
            raise ValidationError(f"Field '{name}' of {self._name} is not numeric")
        return column

    def _flush(self) -> None:
        # A failed flush leaves the transaction for the session owner to roll back.
        try:
            self.session.flush()
        except IntegrityError as exc:
            logger.warning("Constraint violation on %s: %s", self._name, exc.orig)
            raise ConflictError(
                f"{self._name} write violates a unique or relation constraint"
            ) from exc

    def _select(self, where: Mapping[str, Any] | None) -> Select[Any]:
        return select(self.model).where(*self._conditions(where))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_unique(self, **where: Any) -> ModelT | None:
        """Return the row identified by a primary or unique key, or ``None``."""
        if frozenset(where) not in self._unique_key_sets():
            raise ValidationError(
                f"find_unique on {self._name} needs a unique key, got {sorted(where)}"
            )
        return self.session.execute(self._select(where)).scalar_one_or_none()

    def find_unique_or_raise(self, **where: Any) -> ModelT:
        """Like :meth:`find_unique` but raise :class:`NotFoundError` when missing."""
        found = self.find_unique(**where)
        if found is None:
            raise NotFoundError(f"{self._name} not found")
        return found

    def find_first(
        self, where: Mapping[str, Any] | None = None, *, order_by: OrderBy = None
    ) -> ModelT | None:
        stmt = self._select(where).order_by(*self._order_clauses(order_by)).limit(1)
        return self.session.execute(stmt).scalars().first()

    def find_many(
        self,
        where: Mapping[str, Any] | None = None,
        *,
        order_by: OrderBy = None,
        skip: int = 0,
        take: int | None = None,
    ) -> list[ModelT]:
        stmt = self._select(where).order_by(*self._order_clauses(order_by))
        if skip:
            stmt = stmt.offset(skip)
        if take is not None:
            stmt = stmt.limit(take)
        return list(self.session.execute(stmt).scalars().all())

    def count(self, **where: Any) -> int:
        stmt = select(func.count()).select_from(self.model).where(*self._conditions(where))
        return int(self.session.execute(stmt).scalar_one())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, **data: Any) -> ModelT:
        self._check_writable(data)
        instance = self.model(**data)
        self.session.add(instance)
        self._flush()
        return instance  # type: ignore[return-value]

    def create_many(self, rows: Iterable[Mapping[str, Any]], *, skip_duplicates: bool = False) -> int:
        """Insert several rows and return how many were inserted.

        With ``skip_duplicates`` a row is dropped when any unique key it fully
        specifies already exists, either in the table or earlier in ``rows``.
        """
        key_sets = self._unique_key_sets()
        seen: set[tuple[frozenset[str], tuple[Any, ...]]] = set()
        inserted = 0
        for row in rows:
            self._check_writable(row)
            if skip_duplicates and self._is_duplicate(row, key_sets, seen):
                continue
            self.session.add(self.model(**row))
            inserted += 1
        self._flush()
        return inserted

    def _is_duplicate(
        self,
        row: Mapping[str, Any],
        key_sets: list[frozenset[str]],
        seen: set[tuple[frozenset[str], tuple[Any, ...]]],
    ) -> bool:
        marks = []
        for keys in key_sets:
            if not keys <= set(row) or any(row[k] is None for k in keys):
                continue
            mark = (keys, tuple(row[k] for k in sorted(keys)))
            if mark in seen or self.count(**{k: row[k] for k in keys}) > 0:
                return True
            marks.append(mark)
        seen.update(marks)
        return False

    def update(self, where: Mapping[str, Any], **data: Any) -> ModelT:
        """Update the row identified by ``where`` (a unique key)."""
        self._check_writable(data)
        instance = self.find_unique_or_raise(**where)
        for field, value in data.items():
            setattr(instance, field, value)
        self._flush()
        return instance

    def update_many(self, where: Mapping[str, Any] | None = None, **data: Any) -> int:
        """Apply ``data`` to every matching row and return the affected count."""
        if not data:
            return 0
        columns = self._columns()
        unknown = sorted(set(data) - set(columns))
        if unknown:
            raise ValidationError(f"Unknown field(s) for {self._name}: {', '.join(unknown)}")
        values = dict(data)
        if "updated_at" in columns and "updated_at" not in values:
            values["updated_at"] = datetime.now(UTC)
        stmt = (
            update(self.model)
            .where(*self._conditions(where))
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        try:
            result = self.session.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError(
                f"{self._name} update violates a unique or relation constraint"
            ) from exc
        return result.rowcount or 0

    def upsert(
        self,
        where: Mapping[str, Any],
        *,
        create_data: Mapping[str, Any],
        update_data: Mapping[str, Any],
    ) -> ModelT:
        """Update the row identified by ``where`` or create it when missing."""
        existing = self.find_unique(**where)
        if existing is not None:
            return self.update(where, **update_data)
        return self.create(**{**where, **create_data})

    def delete(self, **where: Any) -> ModelT:
        """Delete the row identified by ``where`` and return it."""
        instance = self.find_unique_or_raise(**where)
        self.session.delete(instance)
        self._flush()
        return instance

    def delete_many(self, **where: Any) -> int:
        stmt = (
            delete(self.model)
            .where(*self._conditions(where))
            .execution_options(synchronize_session="fetch")
        )
        try:
            result = self.session.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError(
                f"{self._name} delete is blocked by dependent records"
            ) from exc
        return result.rowcount or 0

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def _aggregate_columns(
        self,
        count: bool | Sequence[str],
        sum_of: Sequence[str],
        avg_of: Sequence[str],
        min_of: Sequence[str],
        max_of: Sequence[str],
    ) -> list[tuple[str, str | None, Any]]:
        """Return ``(bucket, field, expression)`` triples for the requested aggregates."""
        specs: list[tuple[str, str | None, Any]] = []
        if count is True:
            specs.append(("_count", None, func.count()))
        elif count:
            for name in count:
                specs.append(("_count", name, func.count(self._column(name))))
        for name in sum_of:
            specs.append(("_sum", name, func.sum(self._numeric_column(name))))
        for name in avg_of:
            specs.append(("_avg", name, func.avg(self._numeric_column(name))))
        for name in min_of:
            specs.append(("_min", name, func.min(self._column(name))))
        for name in max_of:
            specs.append(("_max", name, func.max(self._column(name))))
        return specs

    @staticmethod
    def _fold(specs: list[tuple[str, str | None, Any]], values: Sequence[Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for (bucket, field, _), value in zip(specs, values, strict=True):
            if field is None:
                result[bucket] = int(value or 0)
            else:
                if bucket == "_count":
                    value = int(value or 0)
                elif bucket == "_avg" and value is not None:
                    value = float(value)
                result.setdefault(bucket, {})[field] = value
        return result

    def aggregate(
        self,
        where: Mapping[str, Any] | None = None,
        *,
        count: bool | Sequence[str] = False,
        sum_of: Sequence[str] = (),
        avg_of: Sequence[str] = (),
        min_of: Sequence[str] = (),
        max_of: Sequence[str] = (),
    ) -> dict[str, Any]:
        """Compute aggregates over the matching rows.

        Returns a dict keyed by ``_count``, ``_sum``, ``_avg``, ``_min`` and
        ``_max``. ``_count`` is an int when ``count=True``. When given a list
        of fields it is a per-field dict of non-null counts.
        """
        specs = self._aggregate_columns(count, sum_of, avg_of, min_of, max_of)
        if not specs:
            raise ValidationError("aggregate needs at least one aggregate field")
        stmt = select(*(expr for _, _, expr in specs)).select_from(self.model)
        stmt = stmt.where(*self._conditions(where))
        row = self.session.execute(stmt).one()
        return self._fold(specs, tuple(row))

    def group_by(
        self,
        by: Sequence[str],
        where: Mapping[str, Any] | None = None,
        *,
        count: bool | Sequence[str] = True,
        sum_of: Sequence[str] = (),
        avg_of: Sequence[str] = (),
        min_of: Sequence[str] = (),
        max_of: Sequence[str] = (),
        order_by: OrderBy = None,
        take: int | None = None,
    ) -> list[dict[str, Any]]:
        """Group matching rows by ``by`` and aggregate each group.

        ``order_by`` accepts the grouping fields and ``_count`` (for example
        ``"-_count"`` for the largest groups first).
        """
        if not by:
            raise ValidationError("group_by needs at least one field")
        group_columns = [self._column(name) for name in by]
        specs = self._aggregate_columns(count, sum_of, avg_of, min_of, max_of)
        stmt = (
            select(*group_columns, *(expr for _, _, expr in specs))
            .select_from(self.model)
            .where(*self._conditions(where))
            .group_by(*group_columns)
        )
        names = [order_by] if isinstance(order_by, str) else list(order_by or [])
        for name in names:
            descending = name.startswith("-")
            key = name.lstrip("-")
            if key == "_count":
                expr = func.count()
            elif key in by:
                expr = self._column(key)
            else:
                raise ValidationError(f"Cannot order group_by on '{key}'")
            stmt = stmt.order_by(expr.desc() if descending else expr.asc())
        if take is not None:
            stmt = stmt.limit(take)

        groups = []
        for row in self.session.execute(stmt).all():
            values = tuple(row)
            group = dict(zip(by, values[: len(by)], strict=True))
            group.update(self._fold(specs, values[len(by) :]))
            groups.append(group)
        return groups
