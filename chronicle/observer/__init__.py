"""Observer layer: the read-mostly facade for downstream readers."""

from .api import (
    InvalidLocationError,
    InvalidTimeUnitError,
    NothingToUndoError,
    ObserverError,
    WorldStateAPI,
)
from .snapshots import LocationDisplaySnapshot, TimeDisplaySnapshot

__all__ = [
    "InvalidLocationError",
    "InvalidTimeUnitError",
    "NothingToUndoError",
    "ObserverError",
    "WorldStateAPI",
    "LocationDisplaySnapshot",
    "TimeDisplaySnapshot",
]
