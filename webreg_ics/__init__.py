"""Convert a saved UCSD WebReg list view into an iCalendar file."""

__version__ = "0.1.0"
