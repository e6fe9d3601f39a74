"""
Ordered-table gateway over the ledger tables.

Rows are identified by their stable primary key. Positions (1-based, with
the first data row at position 2 behind a notional header row) are offered
for callers that still think in sheet coordinates, and are translated to ids
here and nowhere else.
"""

import logging
from typing import Any, Iterable, Union

from sqlalchemy import inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from timebank.core.errors import NotFoundError, ValidationFailure
from timebank.db.database import Base
from timebank.db.models import (
    ArchiveRecords,
    AvailabilitySlots,
    EarnedRequests,
    StaffBuildings,
    StaffMembers,
    UsedRequests,
)


logger = logging.getLogger(__name__)

HEADER_OFFSET = 1
FIRST_DATA_POSITION = HEADER_OFFSET + 1

TABLES: dict[str, type[Base]] = {
    model.__tablename__: model
    for model in (
        StaffMembers,
        StaffBuildings,
        EarnedRequests,
        UsedRequests,
        ArchiveRecords,
        AvailabilitySlots,
    )
}


class RowStore:
    """One named table, read and written in physical (id) order."""

    def __init__(self, db: Session, model: type[Base]):
        self.db = db
        self.model = model
        self.table_name = model.__tablename__

    @classmethod
    def open(cls, db: Session, table_name: str) -> "RowStore":
        model = TABLES.get(table_name)
        if model is None:
            raise NotFoundError(f"Table '{table_name}' not found")
        return cls(db, model)

    @property
    def columns(self) -> list[str]:
        return [c.key for c in self.model.__table__.columns]

    # ---- reads ----

    def list_all(self) -> list[Any]:
        stmt = select(self.model).order_by(self.model.id)
        return list(self.db.execute(stmt).scalars().all())

    def get_range(self, start_position: int, count: int) -> list[Any]:
        if count <= 0:
            return []
        offset = self._position_to_index(start_position)
        stmt = select(self.model).order_by(self.model.id).offset(offset).limit(count)
        return list(self.db.execute(stmt).scalars().all())

    def get(self, row_id: int) -> Any:
        row = self.db.get(self.model, row_id)
        if row is None:
            raise NotFoundError(f"Row {row_id} not found in '{self.table_name}'")
        return row

    def row_at(self, position: int) -> Any:
        rows = self.get_range(position, 1)
        if not rows:
            raise NotFoundError(f"No row at position {position} in '{self.table_name}'")
        return rows[0]

    def position_of(self, row_id: int) -> int:
        ids = self.db.execute(select(self.model.id).order_by(self.model.id)).scalars().all()
        try:
            return ids.index(row_id) + FIRST_DATA_POSITION
        except ValueError:
            raise NotFoundError(f"Row {row_id} not found in '{self.table_name}'") from None

    # ---- writes ----

    def append_row(self, **values: Any) -> Any:
        row = self.model(**values)
        self.db.add(row)
        self.db.flush()
        return row

    def update_row(self, row: Any, **values: Any) -> Any:
        for column, value in values.items():
            self._check_column(column)
            setattr(row, column, value)
        self.db.flush()
        return row

    def set_cell(self, position: int, column: Union[int, str], value: Any) -> None:
        row = self.row_at(position)
        if isinstance(column, int):
            if not 1 <= column <= len(self.columns):
                raise ValidationFailure(f"Column index {column} out of range for '{self.table_name}'")
            column = self.columns[column - 1]
        self.update_row(row, **{column: value})

    def delete(self, row: Any) -> None:
        self.db.delete(row)
        self.db.flush()

    def delete_row(self, position: int) -> None:
        self.delete(self.row_at(position))

    def delete_rows(self, positions: Iterable[int]) -> int:
        """
        Delete several rows given by position.

        Deleting position k shifts every later row up by one, so positions are
        processed highest first; each remaining position is still valid when
        its turn comes.
        """
        deleted = 0
        for position in sorted(set(positions), reverse=True):
            self.delete_row(position)
            deleted += 1
        return deleted

    # ---- helpers ----

    def _position_to_index(self, position: int) -> int:
        if position < FIRST_DATA_POSITION:
            raise ValidationFailure(f"Position {position} is before the first data row")
        return position - FIRST_DATA_POSITION

    def _check_column(self, column: str) -> None:
        if column not in self.columns:
            raise ValidationFailure(f"Unknown column '{column}' for '{self.table_name}'")


def verify_schema(engine: Engine) -> None:
    """
    Fail fast when a live table is missing a declared column.
    Tables that do not exist yet are left to create_all.
    """
    inspector = inspect(engine)
    existing = set(inspector.get_table_names())
    for name, model in TABLES.items():
        if name not in existing:
            continue
        live = {c["name"] for c in inspector.get_columns(name)}
        declared = {c.name for c in model.__table__.columns}
        missing = declared - live
        if missing:
            raise ValidationFailure(f"Table '{name}' is missing columns: {', '.join(sorted(missing))}")
    logger.debug("Schema verified for %d tables", len(TABLES))
