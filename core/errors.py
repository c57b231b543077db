# Simulator error hierarchy


class SimulatorError(Exception):
    """Base class for every failure that aborts a simulation run."""


class ConfigurationError(SimulatorError):
    pass


class MetaDataFormatError(SimulatorError):
    pass


class UnrecognizedOperationKind(SimulatorError):
    pass
