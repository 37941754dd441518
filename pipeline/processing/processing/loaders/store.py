"""PericiaStore — owner-scoped insert / find-one / update over SQLAlchemy."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Optional

from sqlalchemy import Engine, create_engine, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from models.base import Base
from models.pericia import Pericia, PericiaCreateSchema, PericiaSchema

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """The record store rejected an operation (constraint, lookup, connection)."""


class DuplicateBusinessKeyError(StoreError):
    """More than one owned record carries the same process number."""

    def __init__(self, numero_processo: str, count: int) -> None:
        super().__init__(
            f"Nº do processo {numero_processo!r} está duplicado ({count} perícias); "
            "nenhuma foi atualizada"
        )
        self.numero_processo = numero_processo
        self.count = count


def _describe(exc: SQLAlchemyError) -> str:
    """Prefer the driver's own message over SQLAlchemy's wrapped one."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class PericiaStore:
    """Record store for ``pericias``.

    Every call runs in its own transaction: a rejected row is rolled back on
    its own and never affects rows written before it. All reads and writes are
    filtered by the owning ``user_id``.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory: sessionmaker[Session] = sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, database_url: str) -> PericiaStore:
        """Build a store from a SQLAlchemy URL (``postgresql+psycopg://...``)."""
        return cls(create_engine(database_url))

    def create_tables(self) -> None:
        Base.metadata.create_all(self.engine)
        logger.info("pericias table ensured")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def insert(self, record: PericiaCreateSchema, user_id: uuid.UUID) -> uuid.UUID:
        """Insert a new record owned by *user_id* and return its id."""
        with self._session_factory() as session:
            try:
                pericia = Pericia(user_id=user_id, **record.model_dump(mode="python"))
                session.add(pericia)
                session.flush()
                pericia_id = pericia.id
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StoreError(_describe(exc)) from exc
        return pericia_id

    def find_one(self, numero_processo: str, user_id: uuid.UUID) -> Optional[PericiaSchema]:
        """Return the record with this process number owned by *user_id*.

        Returns ``None`` when nothing matches.

        Raises:
            DuplicateBusinessKeyError: If more than one owned record matches.
            StoreError: If the lookup itself fails.
        """
        stmt = (
            select(Pericia)
            .where(Pericia.numero_processo == numero_processo, Pericia.user_id == user_id)
            .limit(2)
        )
        with self._session_factory() as session:
            try:
                matches = session.scalars(stmt).all()
            except SQLAlchemyError as exc:
                raise StoreError(_describe(exc)) from exc

            if not matches:
                return None
            if len(matches) > 1:
                count = session.scalar(
                    select(func.count())
                    .select_from(Pericia)
                    .where(Pericia.numero_processo == numero_processo, Pericia.user_id == user_id)
                )
                raise DuplicateBusinessKeyError(numero_processo, count)
            return PericiaSchema.model_validate(matches[0])

    def update(self, pericia_id: uuid.UUID, user_id: uuid.UUID, changes: dict[str, Any]) -> None:
        """Apply a partial update to one owned record.

        Only the keys present in *changes* are written.
        """
        if not changes:
            return
        stmt = (
            update(Pericia)
            .where(Pericia.id == pericia_id, Pericia.user_id == user_id)
            .values(**changes)
        )
        with self._session_factory() as session:
            try:
                result = session.execute(stmt)
                if result.rowcount == 0:
                    session.rollback()
                    raise StoreError(f"Perícia {pericia_id} não encontrada")
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StoreError(_describe(exc)) from exc

    def get(self, pericia_id: uuid.UUID, user_id: uuid.UUID) -> Optional[PericiaSchema]:
        stmt = select(Pericia).where(Pericia.id == pericia_id, Pericia.user_id == user_id)
        with self._session_factory() as session:
            pericia = session.scalars(stmt).first()
            return PericiaSchema.model_validate(pericia) if pericia is not None else None

    def list_for_user(self, user_id: uuid.UUID) -> list[PericiaSchema]:
        stmt = (
            select(Pericia)
            .where(Pericia.user_id == user_id)
            .order_by(Pericia.numero, Pericia.data_nomeacao, Pericia.numero_processo)
        )
        with self._session_factory() as session:
            return [PericiaSchema.model_validate(p) for p in session.scalars(stmt)]
