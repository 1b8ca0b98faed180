"""Generic access layer over the ledger's shared tables."""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional

from sqlalchemy import Table, delete, or_
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from bankbook.database.models import Currency, TransactionType, create_ledger_engine
from bankbook.domain.errors import IntegrityViolation, ValidationError
from bankbook.utils import date_codec

logger = logging.getLogger(__name__)


class _Unset:
    """Marker for a field that was not provided, as opposed to one set to None."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    """Return True if a partial-update field was provided."""
    return value is not UNSET


def generate_unique_id() -> str:
    """Generate a ZPUNIQUEID value (upper-case UUID4)."""
    return str(uuid.uuid4()).upper()


class LedgerStore:
    """Explicit handle to one open ledger file.

    Opened once, passed to every service, closed once. All multi-row writes
    go through ``atomic()`` so they commit together or not at all.
    """

    def __init__(self, database_url: str, readonly: bool = False):
        """Initialize the store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to/core.sql')
            readonly: Whether the underlying file was opened read-only
        """
        self.database_url = database_url
        self.readonly = readonly
        self.engine = create_ledger_engine(database_url, readonly=readonly)
        self.session_factory = sessionmaker(bind=self.engine)
        self._session: Optional[Session] = None
        self._depth = 0

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    @property
    def session(self) -> Session:
        return self._get_session()

    def close(self) -> None:
        """Close the session and release the connection pool."""
        if self._session is not None:
            self._session.close()
            self._session = None
        self.engine.dispose()

    @contextmanager
    def atomic(self) -> Iterator[Session]:
        """Run the enclosed writes as one unit.

        Nested calls join the outermost unit; only the outermost commits.
        Any exception rolls back every write made inside the unit.

        Raises:
            IntegrityViolation: If a write violated a referential constraint
            ValidationError: If the ledger was opened read-only
        """
        session = self._get_session()
        if self._depth:
            self._depth += 1
            try:
                yield session
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.debug("Rolled back atomic unit: %s", e.orig)
            raise IntegrityViolation(f"Integrity constraint failed: {e.orig}") from e
        except OperationalError as e:
            session.rollback()
            if not self.readonly:
                raise
            logger.debug("Rejected write to read-only ledger: %s", e.orig)
            raise ValidationError("Ledger is read-only") from e
        except Exception:
            session.rollback()
            raise
        finally:
            self._depth = 0

    def insert(self, row: Any) -> int:
        """Insert an ORM row and return its new primary key."""
        with self.atomic() as session:
            session.add(row)
            session.flush()
            return row.id

    def update_fields(
        self,
        model: Any,
        row_id: int,
        fields: Mapping[str, Any],
        columns: Optional[Mapping[str, str]] = None,
        *,
        criteria: tuple = (),
        touch_modification_date: bool = True,
        increment_version: bool = True,
    ) -> int:
        """Apply a partial update to one row.

        Args:
            model: ORM class of the target table
            row_id: Primary key of the row
            fields: Field name -> new value; UNSET values are skipped
            columns: Field name -> model attribute name (defaults to the field name)
            criteria: Extra filter expressions, e.g. a discriminator restriction
            touch_modification_date: Also write ZPMODIFICATIONDATE
            increment_version: Also increment Z_OPT

        Returns:
            Number of rows changed; 0 when no fields were provided or no row matched
        """
        columns = columns or {}
        values = {
            getattr(model, columns.get(field, field)): value
            for field, value in fields.items()
            if is_set(value)
        }
        if not values:
            return 0

        if touch_modification_date:
            values[model.modification_date] = date_codec.now()
        if increment_version:
            values[model.opt] = model.opt + 1

        with self.atomic() as session:
            session.flush()
            changed = (
                session.query(model)
                .filter(model.id == row_id, *criteria)
                .update(values, synchronize_session=False)
            )
            session.expire_all()
        return changed

    def delete_rows(self, target: Any, *criteria) -> int:
        """Delete rows of a model or association table matching all criteria."""
        with self.atomic() as session:
            session.flush()
            if isinstance(target, Table):
                deleted = session.execute(delete(target).where(*criteria)).rowcount
            else:
                deleted = session.query(target).filter(*criteria).delete(synchronize_session=False)
            session.expire_all()
        return deleted

    # Reference data lookups
    def default_currency_id(self) -> Optional[int]:
        """Return the first currency in the ledger."""
        currency = self.session.query(Currency).order_by(Currency.id).first()
        return currency.id if currency else None

    def currency_id_by_code(self, code: str) -> Optional[int]:
        currency = self.session.query(Currency).filter(Currency.code == code).first()
        return currency.id if currency else None

    def transaction_type_id(self, type_name: str) -> Optional[int]:
        """Look up a transaction type by display name or short code."""
        txn_type = (
            self.session.query(TransactionType)
            .filter(or_(TransactionType.name == type_name, TransactionType.short_name == type_name))
            .first()
        )
        return txn_type.id if txn_type else None
