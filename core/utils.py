"""
Utils - Utilidades generales de la plataforma

Funciones auxiliares para logging, manejo de paths y formato de fechas.
"""

import logging
from pathlib import Path
from typing import Any, Optional
import sys
from datetime import date, datetime, timezone


MESES_CORTOS_EN = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura y devuelve un logger con formato estándar.

    Args:
        name: Nombre del logger
        level: Nivel de logging (default: INFO)

    Returns:
        Logger configurado
    """
    logger = logging.getLogger(name)

    # Evitar duplicar handlers si ya existe
    if logger.handlers:
        return logger

    logger.setLevel(level)

    # Handler para consola
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    # Formato del log
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    return logger


def get_project_root() -> Path:
    """
    Obtiene el directorio raíz del proyecto.

    Returns:
        Path al directorio raíz (donde están core/, ui/ y views/)
    """
    # Desde este archivo (core/utils.py), subir un nivel
    return Path(__file__).resolve().parent.parent


def parse_iso_datetime(value: Any) -> Optional[datetime]:
    """
    Convierte un valor de fecha a ``datetime`` comparable.

    Acepta ``date``, ``datetime`` y strings ISO 8601 (``2024-03-01``,
    ``2024-03-01T10:30:00``, ``2024-03-01T10:30:00Z``). Las fechas con zona
    horaria se normalizan a UTC sin tzinfo para poder compararlas entre sí.

    Args:
        value: Valor a convertir

    Returns:
        datetime o None si no se puede interpretar
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def format_short_date(value: Any) -> str:
    """
    Formatea una fecha como ``M/D/YYYY`` (formato local por defecto en-US).

    Si el valor no es una fecha reconocible se devuelve el texto original.

    Ejemplo:
        >>> format_short_date("2024-03-01")
        '3/1/2024'
    """
    if value is None or value == "":
        return ""

    parsed = parse_iso_datetime(value)
    if parsed is None:
        return str(value)
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def format_medium_date(value: Any) -> str:
    """
    Formatea una fecha como ``Mon D, YYYY`` (p.ej. ``Mar 1, 2024``).

    Usa abreviaturas fijas en inglés para no depender del locale del sistema.
    """
    if value is None or value == "":
        return ""

    parsed = parse_iso_datetime(value)
    if parsed is None:
        return str(value)
    return f"{MESES_CORTOS_EN[parsed.month - 1]} {parsed.day}, {parsed.year}"


def slugify_class(text: str) -> str:
    """Convierte un texto en un sufijo de clase CSS (``Decision Maker`` -> ``decision-maker``)."""
    return "-".join(str(text).lower().split())
