"""
mirror.py — Copia espejo de la carpeta de build al working tree.

Dos pasos separados:
1. snapshot(): copia dist/ a un directorio temporal ANTES de cambiar
   de branch. Si dist/ está trackeado en main, al hacer checkout de
   gh-pages desaparecería del disco.
2. mirror_into(): sobre gh-pages, borra los archivos trackeados que
   ya no existen en el build y copia el snapshot a la raíz.

Solo se tocan archivos trackeados o publicados. Los archivos
ignorados (.venv, node_modules, .env...) nunca se borran.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from pagespush.utils.logger import get_logger

logger = get_logger("pagespush.mirror")

SKIPPED_COMPONENTS = frozenset({".git"})


def collect_files(source: Path) -> list[str]:
    """
    Lista los archivos publicables bajo `source`.

    Retorna rutas relativas en formato POSIX, ordenadas. Los
    directorios vacíos no aparecen (git no los trackea), cualquier
    ruta con un componente .git se omite y los symlinks a directorios
    se omiten con una advertencia.
    """
    source = Path(source)
    archivos = []
    for root, dirs, files in os.walk(source, followlinks=False):
        for nombre in dirs:
            if (Path(root) / nombre).is_symlink():
                # no se siguen: un enlace puede apuntar fuera del build o a sí mismo
                logger.warning(f"Se omite symlink a directorio: {Path(root) / nombre}")
        dirs[:] = sorted(
            d for d in dirs
            if d not in SKIPPED_COMPONENTS and not (Path(root) / d).is_symlink()
        )
        for nombre in files:
            if nombre in SKIPPED_COMPONENTS:
                continue
            ruta = Path(root) / nombre
            if not ruta.is_file():
                # symlink roto o archivo especial
                logger.warning(f"Se omite (no es un archivo): {ruta}")
                continue
            archivos.append(ruta.relative_to(source).as_posix())
    return sorted(archivos)


def snapshot(source: Path, target: Path) -> list[str]:
    """
    Copia los archivos de `source` a `target` y retorna su lista.

    `target` debe existir. Los symlinks se copian como archivos.
    """
    archivos = collect_files(source)
    for relativa in archivos:
        destino = target / relativa
        destino.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source / relativa, destino)
    return archivos


def stale_files(tracked: list[str], published: list[str]) -> list[str]:
    """Archivos trackeados que ya no están en el build."""
    publicados = set(published)
    return sorted(f for f in tracked if f not in publicados)


def _clear_path(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


def _prune_empty_dirs(worktree: Path, relativa: str) -> None:
    """Borra los directorios padre que quedaron vacíos."""
    parent = (worktree / relativa).parent
    while parent != worktree:
        try:
            parent.rmdir()
        except OSError:
            break
        parent = parent.parent


def mirror_into(
    snapshot_dir: Path,
    files: list[str],
    worktree: Path,
    tracked: list[str],
) -> tuple[list[str], list[str]]:
    """
    Deja el working tree como espejo del snapshot.

    Args:
        snapshot_dir: Directorio con la copia del build.
        files: Archivos del snapshot (de snapshot()).
        worktree: Raíz del working tree (ya en el branch destino).
        tracked: Archivos trackeados actualmente en el branch destino.

    Returns:
        Tupla (copiados, borrados) con rutas relativas POSIX.
    """
    worktree = Path(worktree)
    borrados = stale_files(tracked, files)
    for relativa in borrados:
        _clear_path(worktree / relativa)
        _prune_empty_dirs(worktree, relativa)

    for relativa in files:
        destino = worktree / relativa
        # Un directorio (o archivo) en el camino bloquea la copia
        for parent in reversed(destino.relative_to(worktree).parents):
            if str(parent) == ".":
                continue
            bloqueo = worktree / parent
            if bloqueo.is_symlink() or bloqueo.is_file():
                bloqueo.unlink()
        if destino.is_dir() and not destino.is_symlink():
            shutil.rmtree(destino)
        elif destino.is_symlink():
            destino.unlink()
        destino.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(snapshot_dir / relativa, destino)

    logger.info(f"Espejo listo: {len(files)} archivos, {len(borrados)} borrados")
    return list(files), borrados
