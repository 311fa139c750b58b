"""ORM model registry.

Importing this package registers both tables on ``Base.metadata``; Alembic's
``env.py`` imports ``Base`` from here for that reason.
"""

from cropwatch.models.base import (
    AppendOnlyMixin,
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from cropwatch.models.crops import Crop
from cropwatch.models.observations import Observation

__all__ = [
    "AppendOnlyMixin",
    "Base",
    "Crop",
    "Observation",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
]
