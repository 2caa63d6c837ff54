"""Game domain services: word pool, hints, guess evaluation, chat and rooms.

This package contains pure(ish) domain logic that should be imported by
the socket gateway and HTTP routes, keeping transport concerns separated
from core game mechanics.
"""

MODES = ('countries', 'cities', 'both')
