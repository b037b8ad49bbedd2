"""
logger.py — Logging para pagespush usando Rich + archivo opcional.

Dual output:
- Rich console: colores y formato para uso interactivo.
  info/success/step van a stdout, warning/error van a stderr.
- Archivo rotativo: solo si PAGESPUSH_LOG_FILE está definido.
  Nunca se crea un archivo de log por defecto, porque el directorio
  actual es el repositorio que estamos publicando.

Uso:
    from pagespush.utils.logger import get_logger, console
    logger = get_logger("pagespush.publisher")
    logger.info("Copiando dist/ ...")
    logger.success("Push completado")
    logger.error("No es un repositorio git")
"""

from __future__ import annotations

import io
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

# Windows: forzar UTF-8 en stdout/stderr (cp1252 no soporta todo).
# No aplicar dentro de pytest (conflicto con el capture system).
_in_pytest = "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ
if sys.platform == "win32" and not _in_pytest:
    if hasattr(sys.stdout, "buffer"):
        sys.stdout = io.TextIOWrapper(
            sys.stdout.buffer, encoding="utf-8", errors="replace"
        )
    if hasattr(sys.stderr, "buffer"):
        sys.stderr = io.TextIOWrapper(
            sys.stderr.buffer, encoding="utf-8", errors="replace"
        )

pagespush_theme = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "step": "bold magenta",
})

console = Console(theme=pagespush_theme)
err_console = Console(theme=pagespush_theme, stderr=True)

LOG_FILE_ENV = "PAGESPUSH_LOG_FILE"

# ================================================================
# File logging setup
# ================================================================

_file_logger: logging.Logger | None = None


def _setup_file_logger() -> logging.Logger:
    """Configura el logger de archivo con rotación (si se pidió)."""
    global _file_logger
    if _file_logger is not None:
        return _file_logger

    log_path = os.environ.get(LOG_FILE_ENV, "")

    # Sin archivo configurado (o en pytest): logger nulo
    if not log_path or _in_pytest:
        _file_logger = logging.getLogger("pagespush.null")
        _file_logger.addHandler(logging.NullHandler())
        _file_logger.propagate = False
        return _file_logger

    log_file = Path(log_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    _file_logger = logging.getLogger("pagespush.file")
    _file_logger.setLevel(logging.DEBUG)
    _file_logger.propagate = False

    # Evitar handlers duplicados
    if not _file_logger.handlers:
        handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=5,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        _file_logger.addHandler(handler)

    return _file_logger


def reset_file_logger() -> None:
    """Olvida el logger de archivo (para releer PAGESPUSH_LOG_FILE)."""
    global _file_logger
    if _file_logger is not None:
        for handler in list(_file_logger.handlers):
            handler.close()
            _file_logger.removeHandler(handler)
    _file_logger = None


class PublisherLogger:
    """
    Logger con Rich para la terminal + archivo opcional.

    Cada módulo crea su propio logger con un nombre para
    identificar de dónde viene cada mensaje.

    Args:
        name: Nombre del módulo (ej: "pagespush.git")
    """

    def __init__(self, name: str):
        self._name = name

    @property
    def _file(self) -> logging.Logger:
        return _setup_file_logger()

    def info(self, message: str) -> None:
        """Mensaje informativo (cyan)."""
        console.print(f"[info]i  {escape(message)}[/info]", highlight=False)
        self._file.info(f"[{self._name}] {message}")

    def success(self, message: str) -> None:
        """Mensaje de éxito (verde)."""
        console.print(f"[success][OK] {escape(message)}[/success]", highlight=False)
        self._file.info(f"[{self._name}] OK: {message}")

    def warning(self, message: str) -> None:
        """Mensaje de advertencia (amarillo, stderr)."""
        err_console.print(f"[warning][!] {escape(message)}[/warning]", highlight=False)
        self._file.warning(f"[{self._name}] {message}")

    def error(self, message: str) -> None:
        """Mensaje de error (rojo, stderr)."""
        err_console.print(f"[error][X] {escape(message)}[/error]", highlight=False)
        self._file.error(f"[{self._name}] {message}")

    def step(self, number: int, total: int, message: str) -> None:
        """Mensaje de paso en un proceso."""
        console.print(f"[step]  [{number}/{total}] {escape(message)}[/step]", highlight=False)
        self._file.info(f"[{self._name}] [{number}/{total}] {message}")


def get_logger(name: str = "pagespush") -> PublisherLogger:
    """
    Obtiene un logger para el módulo especificado.

    Args:
        name: Nombre del módulo.

    Returns:
        PublisherLogger configurado.
    """
    return PublisherLogger(name)
