"""Domain errors raised by the persistence layer and translated at the edges."""


class DesignCMSError(Exception):
    """Base class for design system CMS errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RecordNotFoundError(DesignCMSError):
    """A theme, component or run does not exist."""


class DuplicateRecordError(DesignCMSError):
    """A unique column (theme value, component slug, user email) already holds the value."""


class ThemeActivationConflict(DesignCMSError):
    """Another activation committed first; the single-active-theme index rejected this one."""


class ActiveThemeDeletionError(DesignCMSError):
    """The active theme cannot be deleted."""
