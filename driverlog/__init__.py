"""Driver Log - earnings tracking for delivery drivers"""

__version__ = "1.0.0"
