"""
Exceptions raised by the GAME model layer.
"""


class ConfigurationError(ValueError):
    """
    Raised when a model or dataset is assembled from incompatible parts,
    e.g. sub-models that disagree on their task type.
    """


class UnsupportedOperationError(TypeError):
    """
    Raised when an operation is not defined for the given model variants,
    e.g. replacing a fixed-effect sub-model with a random-effect one.
    """


class BroadcastDestroyedError(RuntimeError):
    """Raised when reading a broadcast value after it has been released."""
