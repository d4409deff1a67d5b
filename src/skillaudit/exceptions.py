"""
Exceptions raised by skillaudit.

Checkers report problems as Issues; exceptions are reserved for
required inputs that cannot be read at all.
"""


class SkillAuditError(Exception):
    """Base class for skillaudit errors."""

    pass


class CatalogError(SkillAuditError):
    """Raised when the catalog file is missing or cannot be parsed."""

    def __init__(self, message: str, *, missing: bool = False) -> None:
        super().__init__(message)
        self.missing = missing


class CorpusNotFoundError(SkillAuditError):
    """Raised when the skills directory does not exist."""

    pass
