"""covupload - convert test coverage to Coveralls format and upload it."""

__version__ = "0.1.0"
