"""
storage/opportunities.py - Append-only opportunity log (SQLModel / SQLite).

Profit is stored as a decimal string so that the stored value matches the
computed Decimal exactly.
"""

import os
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Field, Session, SQLModel, col, create_engine, select

from core.exceptions import StorageError
from core.logging import get_logger
from core.models import OpportunityRecord

logger = get_logger(__name__)


class OpportunityRow(SQLModel, table=True):
    __tablename__ = "arbitrage_opportunities"

    id: Optional[int] = Field(default=None, primary_key=True)
    buy_dex: str
    sell_dex: str
    profit_usdc: str
    timestamp: str

    @classmethod
    def from_record(cls, record: OpportunityRecord) -> "OpportunityRow":
        return cls(
            buy_dex=record.buy_dex,
            sell_dex=record.sell_dex,
            profit_usdc=str(record.profit),
            timestamp=record.timestamp.isoformat(),
        )

    def to_record(self) -> OpportunityRecord:
        return OpportunityRecord(
            buy_dex=self.buy_dex,
            sell_dex=self.sell_dex,
            profit=Decimal(self.profit_usdc),
            timestamp=datetime.fromisoformat(self.timestamp),
        )


class OpportunityStore:
    """Durable, insertion-ordered store of detected opportunities."""

    def __init__(self, path: str) -> None:
        self.path = path
        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            self.engine = create_engine(
                f"sqlite:///{path}", connect_args={"check_same_thread": False}
            )
            SQLModel.metadata.create_all(self.engine)
        except (OSError, SQLAlchemyError) as e:
            raise StorageError(
                f"Cannot open opportunity store: {e}",
                {"path": path},
            )
        logger.debug("Opportunity store ready", extra={"context": {"path": path}})

    def append(self, record: OpportunityRecord) -> int:
        """Persist a record and return its row id."""
        row = OpportunityRow.from_record(record)
        try:
            with Session(self.engine) as session:
                session.add(row)
                session.commit()
                session.refresh(row)
        except SQLAlchemyError as e:
            raise StorageError(
                f"Cannot persist opportunity: {e}",
                {"path": self.path, "record": record.to_dict()},
            )
        return row.id

    def list_records(self, limit: Optional[int] = None) -> List[OpportunityRecord]:
        """Records in insertion order; with limit, the most recent ones."""
        try:
            with Session(self.engine) as session:
                statement = select(OpportunityRow).order_by(col(OpportunityRow.id).desc())
                if limit is not None:
                    statement = statement.limit(limit)
                rows = list(session.exec(statement))
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot read opportunities: {e}", {"path": self.path})
        return [row.to_record() for row in reversed(rows)]

    def count(self) -> int:
        try:
            with Session(self.engine) as session:
                return session.exec(
                    select(func.count()).select_from(OpportunityRow)
                ).one()
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot count opportunities: {e}", {"path": self.path})

    def close(self) -> None:
        self.engine.dispose()
