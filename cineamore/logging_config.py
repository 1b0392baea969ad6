"""
Configuration du logging de l'application via loguru.

Fournit un logging structuré avec :
- Sortie console : lisible par l'humain, colorée, pour suivre la modération en direct
- Sortie fichier : sérialisée en JSON, avec rotation, pour l'historique des décisions

Appelé par le point d'entrée CLI et au démarrage de l'application web, pour
que `uvicorn cineamore.web.app:app` lancé seul soit configuré lui aussi.
"""

import sys

from loguru import logger

from .config import Settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(settings: Settings) -> None:
    """Configure le logging à partir des réglages CINEAMORE_LOG_*.

    Réglages utilisés :
        log_level : Niveau minimum de la sortie console
        log_file : Fichier JSON (rotation à log_rotation_size,
            log_retention_count fichiers conservés)

    Les champs passés en kwargs aux appels loguru (pending_id, reviewer...)
    se retrouvent dans la clé "extra" du JSON du fichier.
    """
    logger.remove()

    logger.add(sys.stderr, level=settings.log_level, format=CONSOLE_FORMAT, colorize=True)

    log_file = settings.log_file
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",  # Les appels TMDB sont loggés en DEBUG
        format="{message}",
        serialize=True,
        rotation=settings.log_rotation_size,
        retention=settings.log_retention_count,
        compression="zip",
        enqueue=True,  # Routes FastAPI synchrones dans le threadpool
    )

    logger.debug(
        "Logging configuré",
        log_file=str(log_file),
        level=settings.log_level,
        rotation=settings.log_rotation_size,
    )
