"""
Snow metrics derived from station observations.

- add_new_snow: daily new snow per region from snow-depth changes
- is_snow_plausible: temperature/precipitation gate for a depth increase
"""

from .new_snow import add_new_snow, is_snow_plausible

__all__ = [
    "add_new_snow",
    "is_snow_plausible",
]
