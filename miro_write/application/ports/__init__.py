"""Application ports package.

Re-exports the oracle, bulk humanizer and telemetry ports.
"""

from miro_write.application.ports.bulk_humanizer_port import BulkHumanizerPort
from miro_write.application.ports.oracle_port import ChatMessage, OraclePort
from miro_write.application.ports.telemetry_port import NullTelemetry, TelemetryPort

__all__ = [
    "BulkHumanizerPort",
    "ChatMessage",
    "NullTelemetry",
    "OraclePort",
    "TelemetryPort",
]
