from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Shared database instance for ORM models.
# Constraint names follow one convention across backends and migrations.

_NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

db = SQLAlchemy(
    metadata=MetaData(naming_convention=_NAMING_CONVENTION),
    session_options={"expire_on_commit": False},
)

__all__ = ["db"]
