"""Domain exceptions."""


class InsufficientModelsError(ValueError):
    """Fewer than two models are available for comparison."""


class MissingSamplesError(ValueError):
    """No sample data is available for a required measure."""


class MissingMeasureError(KeyError):
    """Neither the ranking measure nor its averaged variant exists."""


class CyclicGraphError(ValueError):
    """The significance graph contains a cycle and cannot be leveled."""


class UnknownTestError(KeyError):
    """A configured test identifier has no implementation for the requested call shape."""
