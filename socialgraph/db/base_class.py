# socialgraph/db/base_class.py
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import as_declarative, declared_attr


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@as_declarative()
class Base:
    # Table name defaults to the lowercased class name
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
