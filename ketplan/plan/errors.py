"""Exceptions raised by the plan engine."""


class PlanError(Exception):
    """Base class for errors reported to the user about a plan file."""
    pass


class PlanReadError(PlanError):
    """Raised when the plan file cannot be read."""
    pass


class PlanParseError(PlanError):
    """Raised when the plan file is not valid YAML or does not fit the plan schema."""
    pass


class PlanWriteError(PlanError):
    """Raised when the plan cannot be marshalled or written to disk."""
    pass


class PasswordGenerationError(PlanError):
    """Raised when no alphanumeric password was produced within the attempt budget."""
    pass


class PlanNetworkError(PlanError):
    """Raised when an address cannot be derived from the plan's networking settings."""
    pass


class CommentStackError(RuntimeError):
    """The comment scan lost track of the YAML structure.

    This is an internal defect, not a user error: the marshalled text and the
    indentation tracking disagree.
    """
    pass
