# peoplebase/database/models/__init__.py

from peoplebase.database.core.main import Base
from peoplebase.database.models.person import Person

__all__ = [
    "Base",
    "Person",
]
