"""Exceptions raised while resolving configuration and running initializers."""


class RoadieError(Exception):
    """Base class for bootstrap failures"""
    pass


class ConfigurationPathError(RoadieError):
    """The configuration search path is empty"""
    pass


class EnvironmentFileError(RoadieError):
    """An environment file exists but could not be applied"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid environment file {path}: {reason}")


class MissingInitializerError(RoadieError, LookupError):
    """A declared initializer step has no handler"""

    def __init__(self, step: str):
        self.step = step
        super().__init__(f"No initializer registered for step {step!r}")
