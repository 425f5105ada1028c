"""
Bookable slot computation from weekly schedules, busy calendars and booking policy.
"""

__version__ = "0.1.0"
