# Failure taxonomy shared by the relay endpoint and the relay client


class RelayError(Exception):
    # Base class for relay failures
    pass


class UpstreamFailure(RelayError):
    # The completion provider call failed, timed out or returned nothing usable
    def __init__(self, message: str, component: str = "upstream") -> None:
        super().__init__(message)
        self.component = component


class ConfigurationMissing(RelayError, RuntimeError):
    # Required process configuration is absent or blank
    pass
