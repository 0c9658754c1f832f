"""Exception types raised by editgate."""


class EditGateError(Exception):
    """Base class for editgate errors."""


class InvalidHookInputError(EditGateError, ValueError):
    """Hook payload could not be read as a JSON object."""


class InvalidRuleError(EditGateError, TypeError):
    """Object handed to the rule registry does not satisfy the rule contract."""


class ConfigError(EditGateError, ValueError):
    """Configuration file is missing, unreadable or invalid."""
