"""Exceptions raised by the calculation engine."""


class BondCalcError(ValueError):
    """Base class for engine errors."""


class InvalidInputError(BondCalcError):
    """A numeric input is out of range (non-positive principal, bad term, ...)."""


class ConfigurationError(BondCalcError):
    """Bracket or fee-schedule configuration is malformed or unrecognised."""
