"""
Facility Status

The closed set of status comments a facility can carry. Server validation,
the dashboard dropdown, the statuses API and the client all read from here.
"""

from enum import Enum


class FacilityStatus(str, Enum):
    BIN_FULL = 'Bin is full'
    NOT_WORKING = 'Not working'
    OFTEN_BUSY = 'Often busy'
    ONE_CHARGER_DOWN = 'One charger not working'
    LOTS_AVAILABLE = 'Always lots available'
    GREAT_TO_GET_AROUND = 'Great way to get around'
    BRING_A_CABLE = 'Great to charge your phone but bring a cable'

    @classmethod
    def values(cls):
        return [status.value for status in cls]

    @classmethod
    def parse(cls, value):
        """Return the member for ``value`` or None when it is not allowed."""
        if value is None:
            return None
        try:
            return cls(value.strip())
        except ValueError:
            return None
