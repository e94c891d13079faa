from peoplebase.services.schemas.people import (
    PersonCreate,
    PersonRead,
)

__all__ = [
    "PersonCreate",
    "PersonRead",
]
