from wave_api.services.health import PROCESS_STARTED_AT, HealthReporter
from wave_api.services.shutdown import SHUTDOWN_SIGNALS, ShutdownCoordinator, ShutdownState

__all__ = [
    # health
    "HealthReporter",
    "PROCESS_STARTED_AT",
    # shutdown
    "SHUTDOWN_SIGNALS",
    "ShutdownCoordinator",
    "ShutdownState",
]
