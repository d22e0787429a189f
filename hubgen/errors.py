"""Exception hierarchy for hubgen."""


class HubGenError(Exception):
    """Base class for every error hubgen raises on purpose."""


class ConfigError(HubGenError):
    """Raised when the configuration file cannot be parsed."""


class DefinitionError(HubGenError):
    """Raised when an interface definition document is invalid."""


class TypeSyntaxError(DefinitionError):
    """Raised when a type expression cannot be parsed."""


class OperationCancelledError(HubGenError):
    """Raised when a scan or emission is cancelled before it completes."""


class TypeContractError(RuntimeError):
    """A wrapper descriptor reached a stage that must never see it.

    This is a bug in the rewriting stage, not a data problem.
    """
