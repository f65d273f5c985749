"""Internal constants shared across the library."""

BASE_URL = "http://192.168.4.1"
USER_AGENT = "pygrowbox/0.1"

SENSORS_PATH = "/api/sensors"
STATUS_PATH = "/api/status"
TARGETS_PATH = "/api/targets"
EVENTS_PATH = "/events"

# ------------------------------------------------------------------
# Push channel event names
# ------------------------------------------------------------------

SENSOR_UPDATE_EVENT = "sensor_update"
STATUS_UPDATE_EVENT = "status_update"

#: Reconnection delay used by EventSource implementations when the server
#: has not sent a ``retry:`` field.
DEFAULT_RECONNECT_DELAY = 3.0

# ------------------------------------------------------------------
# Display texts (the device UI is in Portuguese)
# ------------------------------------------------------------------

ERROR_SENTINEL = "ERR"

LIGHT_ON_TEXT = "Ligada"
LIGHT_OFF_TEXT = "Desligada"
HUMIDIFIER_ON_TEXT = "Ligado"
HUMIDIFIER_OFF_TEXT = "Desligado"

SUBMIT_SUCCESS_MESSAGE = "Alvos atualizados com sucesso!"
SUBMIT_FAILURE_MESSAGE = "Erro ao atualizar alvos."
SUBMIT_COMMUNICATION_FAILURE_MESSAGE = "Erro de comunicação ao enviar alvos."

DEFAULT_FEEDBACK_CLEAR_DELAY = 5.0

# Decimal places used when rendering numeric readings.
HUMIDITY_DECIMALS = 1
TEMPERATURE_DECIMALS = 1
VPD_DECIMALS = 2
