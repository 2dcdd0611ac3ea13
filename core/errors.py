"""Exceptions raised by the bridge lifecycle code."""


class HueTemperatureError(Exception):
    """Base exception for the Hue temperature client."""

    pass


class TransportError(HueTemperatureError):
    """Network, DNS or timeout failure reaching the bridge or discovery host."""

    pass


class ProtocolError(HueTemperatureError):
    """Non-2xx response, malformed JSON or an unexpected payload shape."""

    pass


class PairingNotReady(HueTemperatureError):
    """Bridge reported error 101: link button not pressed."""

    pass


class PairingRejected(HueTemperatureError):
    """Bridge reported any other pairing error."""

    def __init__(self, description: str, error_type: int | None = None):
        super().__init__(description)
        self.error_type = error_type


class NoSensorFound(HueTemperatureError):
    """No outdoor temperature sensor, or the matched sensor has no reading."""

    pass


class NoCredentials(HueTemperatureError):
    """The poller was asked to run without a paired bridge."""

    pass
