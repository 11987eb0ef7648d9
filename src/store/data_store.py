import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    MetaData,
    String,
    Table,
    and_,
    bindparam,
    false,
    func,
    inspect,
    or_,
    select,
    true,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from src.utils.errors import StoreError

from .engine import get_engine, register_sqlite_functions
from .schemas import AllOf, AnyOf, FieldMatch, Medicine


logger = logging.getLogger(__name__)


class TableManager:
    """Manages the medicines table lifecycle and schema."""

    def __init__(self, engine: Engine, name: str = "medicines") -> None:
        self.engine = engine
        self.name = name
        self.metadata = MetaData()
        self.table = Table(
            name,
            self.metadata,
            # String UUIDs (36 chars with dashes) as primary key
            Column("id", String(36), primary_key=True),
            Column("name", String(255), nullable=False, index=True),
            Column("type", String(255), nullable=False),
            Column("price", Float, nullable=False, default=0.0),
            Column("created_at", DateTime(timezone=True)),
            Column("updated_at", DateTime(timezone=True)),
        )

    def ensure_table(self) -> None:
        self.metadata.create_all(self.engine, tables=[self.table], checkfirst=True)

    def drop_table(self) -> None:
        if inspect(self.engine).has_table(self.name):
            logger.info("Dropping table '%s'.", self.name)
            self.table.drop(self.engine)
            logger.info("Table dropped successfully.")

    def reset_table(self) -> None:
        self.drop_table()
        self.ensure_table()


class SqlMedicineStore:
    """Query and upsert operations; delegates lifecycle to a TableManager."""

    def __init__(
        self,
        engine: Optional[Engine] = None,
        table: str = "medicines",
        manager: Optional[TableManager] = None,
    ) -> None:
        self.engine = engine or get_engine()
        register_sqlite_functions(self.engine)
        self.manager = manager or TableManager(self.engine, name=table)
        self.table = self.manager.table
        self.manager.ensure_table()

    def reset(self) -> None:
        self.manager.reset_table()

    def _compile(self, where: Any):
        if isinstance(where, FieldMatch):
            column = self.table.c[where.field]
            # autoescape keeps % and _ in user input literal
            if where.op == "starts_with":
                return column.istartswith(where.value, autoescape=True)
            return column.icontains(where.value, autoescape=True)
        if isinstance(where, AnyOf):
            if not where.predicates:
                return false()
            return or_(*(self._compile(p) for p in where.predicates))
        if isinstance(where, AllOf):
            if not where.predicates:
                return true()
            return and_(*(self._compile(p) for p in where.predicates))
        raise TypeError(f"Unsupported predicate: {where!r}")

    def find_many(
        self,
        where: Optional[Any] = None,
        *,
        take: Optional[int] = None,
        order_by: Optional[str] = "name",
        exclude_ids: Iterable[str] = (),
    ) -> List[Medicine]:
        stmt = select(self.table)
        if where is not None:
            stmt = stmt.where(self._compile(where))
        excluded = list(exclude_ids)
        if excluded:
            stmt = stmt.where(self.table.c.id.not_in(excluded))
        if order_by is not None:
            if order_by not in self.table.c:
                raise ValueError(f"Cannot order medicines by unknown column {order_by!r}")
            stmt = stmt.order_by(self.table.c[order_by].asc())
        if take is not None:
            stmt = stmt.limit(max(0, take))

        try:
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            raise StoreError(f"Medicine query failed: {e}") from e

        return [self._row_to_medicine(row) for row in rows]

    def upsert(self, medicines: Iterable[Medicine]) -> None:
        now = datetime.now(timezone.utc)
        by_id: Dict[str, Dict[str, Any]] = {}
        for medicine in medicines:
            row = asdict(medicine)
            row["created_at"] = row["created_at"] or now
            row["updated_at"] = now
            by_id[row["id"]] = row
        rows = list(by_id.values())
        if not rows:
            return

        c = self.table.c
        try:
            with self.engine.begin() as conn:
                ids = [r["id"] for r in rows]
                existing = set(conn.execute(select(c.id).where(c.id.in_(ids))).scalars())
                inserts = [r for r in rows if r["id"] not in existing]
                updates = [
                    {
                        "_id": r["id"],
                        "_name": r["name"],
                        "_type": r["type"],
                        "_price": r["price"],
                        "_updated_at": r["updated_at"],
                    }
                    for r in rows
                    if r["id"] in existing
                ]
                if inserts:
                    conn.execute(self.table.insert(), inserts)
                if updates:
                    conn.execute(
                        self.table.update()
                        .where(c.id == bindparam("_id"))
                        .values(
                            name=bindparam("_name"),
                            type=bindparam("_type"),
                            price=bindparam("_price"),
                            updated_at=bindparam("_updated_at"),
                        ),
                        updates,
                    )
        except SQLAlchemyError as e:
            raise StoreError(f"Medicine upsert failed: {e}") from e
        logger.debug("Upserted %d medicines (%d new)", len(rows), len(inserts))

    def count(self) -> int:
        try:
            with self.engine.connect() as conn:
                return conn.execute(
                    select(func.count()).select_from(self.table)
                ).scalar_one()
        except SQLAlchemyError as e:
            raise StoreError(f"Medicine count failed: {e}") from e

    @staticmethod
    def _row_to_medicine(row) -> Medicine:
        return Medicine(
            id=str(row["id"]),
            name=row["name"],
            type=row["type"],
            price=float(row["price"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
