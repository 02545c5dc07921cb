"""Constants for the Wireless Sensor Tag integration."""

from __future__ import annotations

from datetime import timedelta
from types import MappingProxyType

DOMAIN = "wireless_sensor_tag"
MANUFACTURER = "Wireless Sensor Tags"
UNKNOWN_MODEL = "Unknown"

API_BASE_URL = "https://www.mytaglist.com"
SIGNIN_ENDPOINT = "/ethAccount.asmx/Signin"
TAG_LIST_ENDPOINT = "/ethClient.asmx/GetTagList2"
BEEP_ENDPOINT = "/ethClient.asmx/Beep"

DEFAULT_BEEP_DURATION = 1001
DEFAULT_TIMEOUT = timedelta(seconds=30)

# Query frequency is supplied in milliseconds by the host platform.
DEFAULT_QUERY_FREQUENCY_MS = 20000
MIN_QUERY_FREQUENCY_MS = 5000

BATTERY_LOW_THRESHOLD = 0.40

# Tag-type code reported by the service -> friendly model name.
TAG_TYPE_MODELS: MappingProxyType[int, str] = MappingProxyType(
    {
        12: "MotionSensor",
        13: "MotionSensor (Humidity)",
        21: "MotionSensor v2",
        26: "Ambient Light Sensor",
        32: "Water Sensor",
        42: "Outdoor Probe",
        52: "Reed Sensor",
        62: "Thermostat",
        72: "PIR Sensor",
        102: "USB Sensor",
        106: "USB Sensor (Pro)",
        107: "Ambient Light Sensor (Pro)",
    }
)
