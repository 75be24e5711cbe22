"""pilotmath: aviation mental-math drills with progress tracking."""

__version__ = "0.1.0"
