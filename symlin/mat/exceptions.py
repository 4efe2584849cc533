class SymlinError(ValueError):
    """Base class of every error raised while building a model."""


class LookupFailureError(SymlinError, KeyError):
    """
    Raised when a family, variable, index or data symbol cannot be resolved, or when a pattern that must match at
    least one entry matches nothing.
    """

    def __str__(self):
        # KeyError quotes its message
        return str(self.args[0]) if len(self.args) > 0 else ""


class ShapeError(SymlinError):
    """Raised on arity mismatches, mismatched array lengths and invalid operand counts."""


class DomainError(SymlinError):
    """Raised when an algebraic operation is undefined for its operands."""


class ConstructionError(SymlinError):
    """Raised when a model component is constructed with missing or invalid configuration."""
