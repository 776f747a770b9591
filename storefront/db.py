# storefront/db.py
"""
Per-record order store: one row per order, the order itself kept as a JSON
document next to its id. Mutations only touch the rows that changed.
"""
from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Dict, Iterator, List

from sqlalchemy import Column, Integer, String, Text, create_engine, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .repository import LoadResult, OrderDoc, UnitOfWork, _LockedRepository

Base = declarative_base()


class OrderRow(Base):
    __tablename__ = "orders"
    id = Column(String, primary_key=True)
    seq = Column(Integer, nullable=False, index=True)
    created_at = Column(String, default="")
    document = Column(Text, nullable=False, default="{}")


def _dump(doc: OrderDoc) -> str:
    return json.dumps(doc, ensure_ascii=False, allow_nan=False)


def _rows_to_docs(rows: List[OrderRow]) -> List[OrderDoc]:
    out: List[OrderDoc] = []
    for row in rows:
        try:
            v = json.loads(row.document or "{}")
        except json.JSONDecodeError:
            continue
        if isinstance(v, dict):
            out.append(v)
    return out


def make_engine(url: str):
    if url.startswith("sqlite") and (":memory:" in url or url.rstrip("/") == "sqlite:"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url)


class SqlOrderRepository(_LockedRepository):
    def __init__(self, url: str) -> None:
        super().__init__()
        self.engine = make_engine(url)
        self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)
        Base.metadata.create_all(bind=self.engine)

    def _load(self, session: Session) -> List[OrderRow]:
        return list(session.execute(select(OrderRow).order_by(OrderRow.seq)).scalars())

    def load(self) -> LoadResult:
        with self._lock:
            try:
                with self._sessions() as session:
                    return LoadResult(orders=_rows_to_docs(self._load(session)))
            except SQLAlchemyError as e:
                return LoadResult(error=f"unreadable: {e}")

    def save(self, orders: List[OrderDoc]) -> None:
        with self._lock, self._sessions.begin() as session:
            session.execute(delete(OrderRow))
            for seq, doc in enumerate(orders):
                session.add(OrderRow(
                    id=str(doc.get("id")),
                    seq=seq,
                    created_at=str(doc.get("createdAt") or ""),
                    document=_dump(doc),
                ))

    @contextmanager
    def transaction(self) -> Iterator[UnitOfWork]:
        with self._lock:
            try:
                with self._sessions() as session:
                    rows = self._load(session)
                loaded = LoadResult(orders=_rows_to_docs(rows))
            except SQLAlchemyError as e:
                rows, loaded = [], LoadResult(error=f"unreadable: {e}")
            before: Dict[str, str] = {str(d.get("id")): _dump(d) for d in loaded.orders}
            next_seq = max((r.seq for r in rows), default=-1) + 1

            uow = UnitOfWork(loaded)
            yield uow
            if not uow.dirty:
                return

            kept = {str(d.get("id")) for d in uow.orders}
            with self._sessions.begin() as session:
                gone = [oid for oid in before if oid not in kept]
                if gone:
                    session.execute(delete(OrderRow).where(OrderRow.id.in_(gone)))
                seen = set()
                for doc in uow.orders:
                    oid = str(doc.get("id"))
                    # a repeated id is inserted again so the primary key rejects it
                    if oid not in before or oid in seen:
                        session.add(OrderRow(
                            id=oid,
                            seq=next_seq,
                            created_at=str(doc.get("createdAt") or ""),
                            document=_dump(doc),
                        ))
                        next_seq += 1
                    elif _dump(doc) != before[oid]:
                        row = session.get(OrderRow, oid)
                        row.document = _dump(doc)
                        row.created_at = str(doc.get("createdAt") or "")
                    seen.add(oid)

    def close(self) -> None:
        self.engine.dispose()
