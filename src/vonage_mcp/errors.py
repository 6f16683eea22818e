from __future__ import annotations


class DispatchError(Exception):
    """Base class for failures raised while sending a message."""


class ConfigurationError(DispatchError):
    """A sender identity required by the request is not configured."""


class InvalidDestination(DispatchError):
    def __init__(self, destination: str) -> None:
        super().__init__(f"Invalid phone number format: {destination}")
        self.destination = destination


class MissingMessage(DispatchError):
    def __init__(self) -> None:
        super().__init__("Message is required")


class ProviderError(DispatchError):
    """The provider call itself failed; the original exception is __cause__."""
