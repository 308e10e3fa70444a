"""
Generic optimistic-concurrency store.

Each mutable table (movies, modules, departments, users) gets a subclass of
VersionedStore that only declares its model, updatable columns and sort
columns. Every method is one unit of work: it commits or rolls back before
returning, and records it hands out are detached from the session.

Update is guarded by the version the caller last observed:

    UPDATE <table> SET ..., version = version + 1
    WHERE id = :id AND version = :version

Zero affected rows means somebody else won the race (or the row is gone)
and surfaces as EditConflictError.
"""
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import asc, delete, desc, func, update
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlmodel import SQLModel, Session, select

from core.errors import (
    DuplicateKeyError,
    EditConflictError,
    RecordNotFoundError,
    StorageError,
    StorageTimeoutError,
    ValidationError,
)
from core.pagination import Filters, Metadata, calculate_metadata
from database.models.timestamps import utc_now

ModelT = TypeVar("ModelT", bound=SQLModel)

TIMEOUT_MARKERS = (
    "statement timeout",
    "canceling statement",
    "database is locked",
    "timeout expired",
)


def _is_timeout(exc: OperationalError) -> bool:
    text = str(exc.orig).lower()
    return any(marker in text for marker in TIMEOUT_MARKERS)


def _is_unique_violation(exc: IntegrityError) -> bool:
    text = str(exc.orig).lower()
    return "unique" in text or "duplicate key" in text


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    return "foreign key" in str(exc.orig).lower()


@contextmanager
def storage_errors(
    session: Session,
    unique_messages: dict[str, str] | None = None,
    reference_errors: dict[str, str] | None = None,
):
    """Roll back and classify database failures into the application error taxonomy."""
    try:
        yield
    except IntegrityError as e:
        session.rollback()
        if _is_unique_violation(e):
            text = str(e.orig).lower()
            for field, message in (unique_messages or {}).items():
                if field in text:
                    raise DuplicateKeyError(field, message) from e
        if reference_errors and _is_foreign_key_violation(e):
            raise ValidationError(reference_errors) from e
        raise StorageError(f"integrity error: {e.orig}") from e
    except OperationalError as e:
        session.rollback()
        if _is_timeout(e):
            raise StorageTimeoutError(f"query timed out: {e.orig}") from e
        raise StorageError(f"operational error: {e.orig}") from e
    except PoolTimeoutError as e:
        session.rollback()
        raise StorageTimeoutError(f"connection pool exhausted: {e}") from e
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError(str(e)) from e


class VersionedStore(Generic[ModelT]):
    model: type[ModelT]
    # Columns copied from the record on update(); id/version/timestamps are managed here
    updatable_fields: tuple[str, ...] = ()
    # Unique column -> message surfaced when an insert/update collides
    unique_messages: dict[str, str] = {}
    # Field -> message raised as a ValidationError when a delete is blocked by a foreign key
    reference_errors: dict[str, str] = {}

    def __init__(self, session: Session):
        self.session = session

    def _errors(self):
        return storage_errors(self.session, self.unique_messages)

    def _detach(self, record: ModelT) -> ModelT:
        self.session.expunge(record)
        return record

    def _end_read(self) -> None:
        # Close the read-only transaction so nothing stays open between calls
        self.session.rollback()

    def _delete_dependents(self, id: int) -> None:
        """Hook for subclasses that own rows in other tables."""

    def insert(self, record: ModelT) -> ModelT:
        """Persist a new record. The database assigns the id; version starts at 1."""
        record.id = None
        record.version = 1
        with self._errors():
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
        return self._detach(record)

    def get(self, id: int) -> ModelT:
        if id < 1:
            raise RecordNotFoundError()

        with self._errors():
            record = self.session.get(self.model, id)
            if record is not None:
                self._detach(record)
            self._end_read()

        if record is None:
            raise RecordNotFoundError()
        return record

    def update(self, record: ModelT) -> ModelT:
        """Write ``record`` back if its version is still current, then bump its version."""
        values: dict[str, Any] = {field: getattr(record, field) for field in self.updatable_fields}
        if "updated_at" in self.model.model_fields:
            values["updated_at"] = utc_now()

        statement = (
            update(self.model)
            .where(self.model.id == record.id, self.model.version == record.version)
            .values(**values, version=self.model.version + 1)
            .execution_options(synchronize_session=False)
        )

        with self._errors():
            result = self.session.execute(statement)
            if result.rowcount == 0:
                self.session.rollback()
                raise EditConflictError()
            self.session.commit()

        record.version += 1
        if "updated_at" in values:
            record.updated_at = values["updated_at"]
        return record

    def delete(self, id: int) -> None:
        """Delete by id regardless of version."""
        if id < 1:
            raise RecordNotFoundError()

        with storage_errors(self.session, self.unique_messages, self.reference_errors):
            self._delete_dependents(id)
            result = self.session.execute(
                delete(self.model)
                .where(self.model.id == id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.session.rollback()
                raise RecordNotFoundError()
            self.session.commit()

    def get_all(self, filters: Filters, *conditions) -> tuple[list[ModelT], Metadata]:
        """
        Return one page of records matching ``conditions`` plus pagination metadata.

        The total comes from a window count on the same query. Ties on the sort
        column are broken by id so repeated calls page through stable results.
        """
        column = getattr(self.model, filters.sort_column())
        order = desc(column) if filters.sort_descending() else asc(column)

        query = select(self.model, func.count().over().label("total_records"))
        if conditions:
            query = query.where(*conditions)
        query = query.order_by(order, asc(self.model.id)).limit(filters.limit()).offset(filters.offset())

        with self._errors():
            rows = self.session.execute(query).all()
            records = [self._detach(row[0]) for row in rows]
            total_records = rows[0][1] if rows else 0

            # Past the last page the window count has no row to ride on
            if not rows and filters.page > 1:
                count_query = select(func.count()).select_from(self.model)
                if conditions:
                    count_query = count_query.where(*conditions)
                total_records = self.session.execute(count_query).scalar_one()

            self._end_read()

        return records, calculate_metadata(total_records, filters.page, filters.page_size)
