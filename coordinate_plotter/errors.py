"""Errors raised while importing coordinates."""


class CoordinatePlotterError(Exception):
    """Base class for every error the plotter reports to the user."""


class MissingColumnsError(CoordinatePlotterError):
    """The CSV header lacks one or more required columns."""

    def __init__(self, missing):
        self.missing = list(missing)
        quoted = ' and '.join(f'"{col}"' for col in self.missing)
        super().__init__(f"CSV must contain {quoted} column{'s' if len(self.missing) > 1 else ''}.")


class FileReadError(CoordinatePlotterError):
    """A dropped or uploaded file could not be read as CSV text."""


class ParseError(CoordinatePlotterError):
    """The CSV text is structurally broken."""
