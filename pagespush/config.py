"""
config.py — Convenciones y configuración de pagespush.

pagespush no tiene archivo de configuración: todo sale de
convenciones fijas (dist → gh-pages en origin). Aun así, cada
convención se puede sobreescribir con variables de entorno,
cargadas también desde un .env en la raíz del proyecto:

    PAGESPUSH_SOURCE_DIR      → carpeta de build (default: dist)
    PAGESPUSH_BRANCH          → branch destino (default: gh-pages)
    PAGESPUSH_REMOTE          → remote (default: origin)
    PAGESPUSH_COMMIT_MESSAGE  → plantilla del commit
    PAGESPUSH_LOG_FILE        → archivo de log rotativo (opcional)

La plantilla del commit acepta {branch} y {timestamp}.

Uso:
    from pagespush.config import load_config
    config = load_config()
    print(config.branch)  # "gh-pages"
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from pagespush.publishing.errors import ConfigurationError
from pagespush.utils.validators import (
    validate_branch_name,
    validate_remote_name,
    validate_source_dir,
)

ENV_PREFIX = "PAGESPUSH_"


@dataclass
class PublishConfig:
    """Configuración de una publicación."""
    source_dir: str = "dist"
    branch: str = "gh-pages"
    remote: str = "origin"
    commit_message: str = "Update {branch}: {timestamp}"
    log_file: str = ""

    def format_commit_message(self, timestamp: str) -> str:
        """Rellena la plantilla del mensaje de commit."""
        try:
            return self.commit_message.format(
                branch=self.branch, timestamp=timestamp
            )
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigurationError(
                f"Plantilla de commit inválida: {self.commit_message!r}",
                cause=e,
            ) from e


# ============================================================
# Funciones de carga
# ============================================================

def _env(name: str, default: str) -> str:
    """Lee PAGESPUSH_<name>; vacío o ausente usa el default."""
    value = os.environ.get(f"{ENV_PREFIX}{name}", "").strip()
    return value or default


def validate_config(config: PublishConfig) -> list[str]:
    """
    Valida la configuración y retorna la lista de problemas.

    Lista vacía significa configuración válida.
    """
    problemas = []
    for validator, value in (
        (validate_source_dir, config.source_dir),
        (validate_branch_name, config.branch),
        (validate_remote_name, config.remote),
    ):
        ok, error = validator(value)
        if not ok:
            problemas.append(error)
    if not config.commit_message.strip():
        problemas.append("El mensaje de commit está vacío")
    return problemas


def load_config(project_dir: Path | None = None) -> PublishConfig:
    """
    Carga la configuración de pagespush.

    Pasos:
    1. Carga <project_dir>/.env si existe (sin pisar el entorno real)
    2. Aplica las variables PAGESPUSH_* sobre las convenciones
    3. Valida los nombres resultantes

    Args:
        project_dir: Raíz del proyecto. Si es None, usa el directorio actual.

    Returns:
        PublishConfig lista para usar.

    Raises:
        ConfigurationError: Si algún valor es inválido.
    """
    proyecto = Path(project_dir) if project_dir is not None else Path.cwd()
    env_path = proyecto / ".env"
    if env_path.is_file():
        load_dotenv(env_path, override=False)

    defaults = PublishConfig()
    config = PublishConfig(
        source_dir=_env("SOURCE_DIR", defaults.source_dir),
        branch=_env("BRANCH", defaults.branch),
        remote=_env("REMOTE", defaults.remote),
        commit_message=_env("COMMIT_MESSAGE", defaults.commit_message),
        log_file=_env("LOG_FILE", defaults.log_file),
    )

    problemas = validate_config(config)
    if problemas:
        raise ConfigurationError("Configuración inválida: " + "; ".join(problemas))

    return config
