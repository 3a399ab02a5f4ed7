# push_worker/logging_config.py
import logging

from pythonjsonlogger.json import JsonFormatter

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
SERVICE_NAME = "push_worker"


class ServiceFilter(logging.Filter):
    """Agrega el nombre del servicio a cada registro."""

    def __init__(self, service_name: str = SERVICE_NAME):
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name
        return True


def create_json_formatter() -> JsonFormatter:
    return JsonFormatter(
        "{asctime}{levelname}{name}{message}{service}",
        style="{",
        rename_fields={"levelname": "level", "name": "logger"},
    )


def configure_logging(level: str = "INFO", service_name: str = SERVICE_NAME) -> None:
    """
    Configura logging JSON en el root logger.
    Se llama una sola vez al arrancar (main.py).
    Lanza ValueError si el nivel no existe.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nivel de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(ServiceFilter(service_name))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # reemplazar handlers para no duplicar líneas
    root.handlers = [handler]
