"""Constants for rightnow.

This module centralizes all magic numbers and default values used throughout the application.
"""

from rightnow.models.task import Capacity, EnergyLevel


# Task defaults (applied at scoring time, never written back to the task)
DEFAULT_IMPORTANCE = 1
DEFAULT_EFFORT = 1

# Composite score weights
BASE_SCORE = 1.0
IMPORTANCE_WEIGHT = 0.8
URGENCY_WEIGHT = 1.0
ENERGY_FIT_WEIGHT = 0.8
TIME_FIT_WEIGHT = 0.6
EFFORT_PENALTY = 0.2

# Urgency
NO_DEADLINE_URGENCY = 0.8
MIN_URGENCY_DAYS = 0.5
MAX_URGENCY = 2.0

# Energy fit (capacity -> task energy -> fit); hand-tuned, do not interpolate
UNKNOWN_ENERGY_FIT = 0.4
ENERGY_FIT_TABLE = {
    Capacity.LOW: {EnergyLevel.LOW: 1.0, EnergyLevel.MED: 0.7, EnergyLevel.HIGH: 0.4},
    Capacity.MED: {EnergyLevel.LOW: 1.0, EnergyLevel.MED: 1.0, EnergyLevel.HIGH: 0.7},
    Capacity.HIGH: {EnergyLevel.LOW: 0.4, EnergyLevel.MED: 0.7, EnergyLevel.HIGH: 1.0},
}

# Time fit
NO_ESTIMATE_TIME_FIT = 0.8
FITS_TIME_BONUS = 0.1

# Suggestions
DEFAULT_MAX_SUGGESTIONS = 3
DEFAULT_AVAILABLE_MINUTES = 30

# Free blocks
MIN_FREE_BLOCK_MINUTES = 5

# Task store
MAX_STARRED_PER_DAY = 3
BRAIN_DUMP_SIZE = 10

# Reminders
DEADLINE_REMINDER_OFFSETS_HOURS = (("24h", 24), ("2h", 2), ("now", 0))
EVENING_REMINDER_HOUR = 19
EVENING_REMINDER_MINUTE = 30

# Calendar view
DEFAULT_FREE_BLOCK_WINDOW_HOURS = 12
