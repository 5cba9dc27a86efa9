"""Exception hierarchy for catalog reconstruction."""


class CatalogError(Exception):
    """Base class for all errors surfaced to the top-level caller."""


class DumpspecParseError(CatalogError):
    """A dumpspec argument failed pattern validation.

    Attributes:
        field: Which component was being parsed ("hostname", "diskname" or "datestamp")
        token: The offending argument
        message: Diagnostic returned by the pattern validator
    """

    def __init__(self, field: str, token: str, message: str):
        self.field = field
        self.token = token
        self.message = message
        super().__init__(f'bad {field} regex "{token}": {message}')


class LogFileOpenError(CatalogError):
    """A log file that passed the existence check could not be opened."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"could not open logfile {path}: {reason}")


class InventoryError(CatalogError):
    """Tapelist or disklist file is unreadable or malformed."""
