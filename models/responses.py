"""Decoders for Hue bridge v1 API responses.

Bridge replies are classified into explicit variants before any business
logic looks at them:

- classify_registration_response: POST /api reply -> RegistrationSuccess,
  RetryableError, FatalError or Malformed
- parse_sensors: GET /api/<username>/sensors reply -> list of SensorReading
- select_outdoor_sensor / decode_temperature: pick and decode the reading
"""

from dataclasses import dataclass
from datetime import datetime

from core.errors import NoSensorFound, PairingNotReady, PairingRejected, ProtocolError
from models.types import SensorReading, TemperatureReading

# Bridge error type for "link button not pressed"
LINK_BUTTON_NOT_PRESSED = 101

TEMPERATURE_SENSOR_TYPE = 'ZLLTemperature'
OUTDOOR_KEYWORD = 'outdoor'


@dataclass(frozen=True)
class RegistrationSuccess:
    username: str


@dataclass(frozen=True)
class RetryableError:
    error_type: int
    description: str


@dataclass(frozen=True)
class FatalError:
    error_type: int | None
    description: str


@dataclass(frozen=True)
class Malformed:
    reason: str


RegistrationResponse = RegistrationSuccess | RetryableError | FatalError | Malformed


def classify_registration_response(payload) -> RegistrationResponse:
    """Classify a registration reply into exactly one variant.

    Only the first element of the reply list is inspected, matching how the
    bridge answers a single registration request.

    Args:
        payload: Decoded JSON body from POST /api

    Returns:
        RegistrationSuccess when a username was issued, RetryableError for
        error 101, FatalError for any other bridge error, Malformed otherwise
    """
    if not isinstance(payload, list) or not payload:
        return Malformed('expected a non-empty list')

    entry = payload[0]
    if not isinstance(entry, dict):
        return Malformed('expected an object as first element')

    success = entry.get('success')
    if isinstance(success, dict):
        username = success.get('username')
        if isinstance(username, str) and username:
            return RegistrationSuccess(username)
        return Malformed('success without username')

    error = entry.get('error')
    if isinstance(error, dict):
        error_type = error.get('type')
        description = error.get('description') or 'Unknown error'
        if error_type == LINK_BUTTON_NOT_PRESSED:
            return RetryableError(error_type, description)
        return FatalError(error_type if isinstance(error_type, int) else None, description)

    return Malformed('neither success nor error in reply')


def bridge_error_description(payload) -> str | None:
    """Return the description of a v1 error reply, or None if it isn't one."""
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        error = payload[0].get('error')
        if isinstance(error, dict):
            return error.get('description') or 'Unknown error'
    return None


def parse_sensors(payload) -> list[SensorReading]:
    """Convert the sensor listing into SensorReading records.

    Entries that aren't objects are skipped; missing fields become empty
    strings and a missing or non-integer temperature becomes None.

    Raises:
        ProtocolError: If payload is not a sensor-id -> sensor mapping
    """
    if not isinstance(payload, dict):
        description = bridge_error_description(payload)
        if description:
            raise ProtocolError(f"Bridge error: {description}")
        raise ProtocolError('Unexpected sensors payload')

    sensors = []
    for sensor_id, sensor in payload.items():
        if not isinstance(sensor, dict):
            continue

        state = sensor.get('state')
        temperature = state.get('temperature') if isinstance(state, dict) else None
        # bool is an int subclass, never a temperature
        if not isinstance(temperature, int) or isinstance(temperature, bool):
            temperature = None

        name = sensor.get('name')
        sensor_type = sensor.get('type')
        sensors.append(SensorReading(
            id=str(sensor_id),
            type=sensor_type if isinstance(sensor_type, str) else '',
            name=name if isinstance(name, str) else '',
            temperature_raw=temperature,
        ))

    return sensors


def select_outdoor_sensor(sensors: list[SensorReading]) -> SensorReading | None:
    """Return the first ZLLTemperature sensor with 'outdoor' in its name."""
    for sensor in sensors:
        if sensor.type == TEMPERATURE_SENSOR_TYPE and OUTDOOR_KEYWORD in sensor.name.lower():
            return sensor
    return None


def decode_temperature(raw: int) -> float:
    """Convert bridge units (hundredths of a degree) to degrees Celsius."""
    return raw / 100


def to_temperature_reading(sensors: list[SensorReading], observed_at: datetime) -> TemperatureReading:
    """Select the outdoor sensor and decode it.

    Raises:
        NoSensorFound: If no sensor matches or the match has no temperature
    """
    sensor = select_outdoor_sensor(sensors)
    if sensor is None:
        raise NoSensorFound('No outdoor temperature sensor found')
    if sensor.temperature_raw is None:
        raise NoSensorFound(f"Sensor '{sensor.name}' has no temperature reading")

    return TemperatureReading(
        temperature_celsius=decode_temperature(sensor.temperature_raw),
        observed_at=observed_at,
        sensor_name=sensor.name,
    )


def expect_username(response: RegistrationResponse) -> str:
    """Return the issued username or raise the matching pairing error.

    Raises:
        PairingNotReady: Error 101, link button not pressed yet
        PairingRejected: Any other bridge error
        ProtocolError: Malformed reply
    """
    if isinstance(response, RegistrationSuccess):
        return response.username
    if isinstance(response, RetryableError):
        raise PairingNotReady(response.description)
    if isinstance(response, FatalError):
        raise PairingRejected(response.description, response.error_type)
    raise ProtocolError(f"Unexpected registration reply: {response.reason}")
