# --------------------------------------------------------------
# File: log.py
# Description: Utilidades de logging compartidas por core, api y la interfaz.
# --------------------------------------------------------------
"""Obtención de loggers con nivel por defecto y configuración centralizada."""

import logging
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Devuelve un logger que propaga al logger raíz.

    Si todavía no se ha llamado a ``basicConfig`` se fija ``WARNING`` como
    nivel por defecto para no inundar la salida.

    Args:
        name (str): Nombre del logger, normalmente ``__name__``.

    Returns:
        logging.Logger: Logger listo para usarse.

    """
    logger = logging.getLogger(name)
    logger.propagate = True
    if not logging.getLogger().handlers:
        logger.setLevel(logging.WARNING)
    return logger


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configura el logger raíz con el formato común del proyecto."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
    # Los loggers creados antes de basicConfig quedaron fijados a WARNING.
    for name in list(logging.Logger.manager.loggerDict):
        if name.split(".", 1)[0] in ("core", "api"):
            logging.getLogger(name).setLevel(logging.NOTSET)
