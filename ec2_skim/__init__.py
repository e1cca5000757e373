"""Interactive EC2 instance picker."""

__version__ = "0.1.0"
