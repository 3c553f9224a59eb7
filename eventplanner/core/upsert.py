import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import insert, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventplanner.core.errors import ConflictError

logger = logging.getLogger(__name__)

_NATIVE_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _dialect_name(db: Session) -> str:
    bind = db.get_bind()
    return bind.dialect.name if bind is not None else ""


def upsert(
    db: Session,
    model: type,
    *,
    index_elements: Sequence[str],
    values: Mapping[str, Any],
    update_values: Mapping[str, Any],
) -> None:
    """Insert ``values`` or, if the unique key already exists, apply ``update_values``.

    ``index_elements`` must name the columns of a unique constraint on ``model``.
    The caller commits.
    """
    native_insert = _NATIVE_INSERTS.get(_dialect_name(db))
    if native_insert is not None:
        stmt = native_insert(model).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(index_elements),
            set_=dict(update_values),
        )
        db.execute(stmt)
        return

    key_criteria = [getattr(model, column) == values[column] for column in index_elements]
    for attempt in range(2):
        try:
            with db.begin_nested():
                db.execute(insert(model).values(**values))
            return
        except IntegrityError:
            logger.debug(
                "Insert into %s hit unique key %s; updating instead (attempt %s)",
                model.__tablename__,
                list(index_elements),
                attempt + 1,
            )
        result = db.execute(
            update(model)
            .where(*key_criteria)
            .values(**update_values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            return

    raise ConflictError(f"Could not upsert {model.__tablename__} row")
