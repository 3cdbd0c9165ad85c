"""Solution Dependency Mapper: cycles, build layers and migration scores for project sets."""

__version__ = "1.0.0"
