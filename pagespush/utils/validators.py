"""
validators.py -- Validacion de los nombres que usa pagespush.

Antes de tocar el repositorio verificamos que los valores de
configuracion tengan sentido:
1. Branch: que sea un nombre de ref valido para git
2. Remote: que sea un nombre de remote razonable
3. Source dir: que sea una ruta relativa dentro del proyecto

Cada funcion retorna una tupla (es_valido, mensaje_de_error).
Si es_valido es True, el mensaje sera una cadena vacia.

Uso:
    from pagespush.utils.validators import validate_branch_name

    valido, error = validate_branch_name("gh-pages")
    if not valido:
        print(f"Branch invalido: {error}")
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath, PureWindowsPath


# =====================================================================
# Constantes de validacion
# =====================================================================

# Secuencias prohibidas en un nombre de ref (ver git check-ref-format).
FORBIDDEN_REF_SEQUENCES: list[str] = ["..", "@{", "//", "\\"]

# Caracteres prohibidos en un nombre de ref.
FORBIDDEN_REF_CHARS = re.compile(r"[\x00-\x20\x7f~^:?*\[]")

# Remotes: letras, numeros, punto, guion y guion bajo.
REMOTE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def validate_branch_name(name: str) -> tuple[bool, str]:
    """
    Valida un nombre de branch con las reglas de git check-ref-format.

    Args:
        name: Nombre del branch (ej: "gh-pages").

    Returns:
        Tupla (es_valido, mensaje_de_error).
    """
    if not name or not name.strip():
        return False, "El nombre del branch esta vacio"

    if name == "@" or name == "HEAD":
        return False, f"'{name}' no es un nombre de branch permitido"

    if name.startswith("-"):
        return False, "El nombre del branch no puede empezar con '-'"

    if name.startswith("/") or name.endswith("/"):
        return False, "El nombre del branch no puede empezar ni terminar con '/'"

    if name.endswith(".") or name.endswith(".lock"):
        return False, "El nombre del branch no puede terminar con '.' ni '.lock'"

    for seq in FORBIDDEN_REF_SEQUENCES:
        if seq in name:
            return False, f"El nombre del branch contiene '{seq}'"

    if FORBIDDEN_REF_CHARS.search(name):
        return False, "El nombre del branch contiene caracteres no permitidos"

    if any(part.startswith(".") for part in name.split("/")):
        return False, "Ningun componente del branch puede empezar con '.'"

    return True, ""


def validate_remote_name(name: str) -> tuple[bool, str]:
    """Valida el nombre de un remote (ej: "origin")."""
    if not name:
        return False, "El nombre del remote esta vacio"

    if not REMOTE_NAME_PATTERN.match(name):
        return False, f"Nombre de remote invalido: '{name}'"

    return True, ""


def validate_source_dir(path: str) -> tuple[bool, str]:
    """
    Valida la carpeta de build relativa al proyecto.

    Debe ser relativa, no salir del proyecto (sin '..') y no
    apuntar a la raiz ni a .git.
    """
    if not path or not path.strip():
        return False, "La carpeta de build esta vacia"

    posix = PurePosixPath(path.replace("\\", "/"))
    if posix.is_absolute() or PureWindowsPath(path).is_absolute():
        return False, f"La carpeta de build debe ser relativa: '{path}'"

    parts = [p for p in posix.parts if p not in ("", ".")]
    if not parts:
        return False, "La carpeta de build no puede ser la raiz del proyecto"

    if ".." in parts:
        return False, f"La carpeta de build no puede salir del proyecto: '{path}'"

    if parts[0] == ".git":
        return False, "La carpeta de build no puede estar dentro de .git"

    return True, ""
