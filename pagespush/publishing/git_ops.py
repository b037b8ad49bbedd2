"""
git_ops.py — pagespush habla con Git.

Este archivo envuelve todas las operaciones Git que necesita el
Publisher. Usa GitPython para abrir el repositorio y ejecutar los
comandos, y traduce cada git.GitCommandError a la taxonomía de
errores de pagespush (BranchOperationFailed / PushFailed).

Operaciones:
    branch_exists(name)               → ¿existe refs/heads/<name>?
    remote_branch_sha(remote, name)   → git ls-remote --heads
    create_orphan_branch(name)        → checkout --orphan + limpiar index
    checkout(name)                    → cambiar de branch
    track_remote_branch(remote, name) → fetch + branch local con upstream
    stage_all(paths)                  → git add --force
    commit(message)                   → git commit, retorna el sha
    push(remote, branch)              → git push --set-upstream

Uso:
    from pagespush.publishing.git_ops import GitOperations
    git = GitOperations.open(Path.cwd())
    if not git.branch_exists("gh-pages"):
        git.create_orphan_branch("gh-pages")
"""

from __future__ import annotations

from pathlib import Path

import git as gitpython

from pagespush.publishing.errors import (
    BranchOperationFailed,
    NotARepository,
    PushFailed,
)
from pagespush.utils.logger import get_logger

logger = get_logger("pagespush.git")

# git add / git rm reciben rutas en lotes para no pasar el límite de argv
_BATCH_SIZE = 500


def _batches(items: list[str], size: int = _BATCH_SIZE):
    for start in range(0, len(items), size):
        yield items[start:start + size]


class GitOperations:
    """
    Operaciones Git sobre un working tree.

    Args:
        repo: Repositorio GitPython ya abierto (con working tree).
    """

    def __init__(self, repo: gitpython.Repo):
        self._repo = repo
        # Las rutas publicadas son literales: "*.html" no es un glob
        self._repo.git.update_environment(GIT_LITERAL_PATHSPECS="1")

    @classmethod
    def open(cls, path: str | Path) -> "GitOperations":
        """
        Abre el repositorio que contiene `path`.

        Raises:
            NotARepository: Si `path` no está dentro de un working tree.
        """
        try:
            repo = gitpython.Repo(Path(path), search_parent_directories=True)
        except (gitpython.InvalidGitRepositoryError, gitpython.NoSuchPathError) as e:
            raise NotARepository(f"No es un repositorio git: {path}", cause=e) from e

        if repo.bare or repo.working_tree_dir is None:
            raise NotARepository(f"El repositorio no tiene working tree: {path}")
        return cls(repo)

    @property
    def repo(self) -> gitpython.Repo:
        return self._repo

    @property
    def working_tree(self) -> Path:
        return Path(self._repo.working_tree_dir)

    @property
    def git_dir(self) -> Path:
        return Path(self._repo.git_dir)

    # ============================================================
    # Consultas
    # ============================================================

    def has_remote(self, name: str) -> bool:
        return name in [r.name for r in self._repo.remotes]

    def remote_url(self, name: str) -> str:
        """URL del remote (la primera si tiene varias)."""
        return next(self._repo.remote(name).urls)

    def has_commits(self) -> bool:
        """False si HEAD apunta a un branch sin commits todavía."""
        try:
            self._repo.head.commit
        except ValueError:
            return False
        return True

    def is_dirty(self) -> bool:
        """Cambios sin commit en archivos trackeados (ignora untracked)."""
        return self._repo.is_dirty(index=True, working_tree=True, untracked_files=False)

    def current_ref(self) -> str:
        """
        Nombre del branch actual, o el sha si HEAD está detached.

        Se usa para volver al punto de partida al terminar.
        """
        if self._repo.head.is_detached:
            return self._repo.head.commit.hexsha
        return self._repo.active_branch.name

    def branch_exists(self, name: str) -> bool:
        return name in [h.name for h in self._repo.heads]

    def remote_branch_sha(self, remote: str, name: str) -> str | None:
        """
        Sha de `name` en el remote (git ls-remote), o None si no existe.

        Raises:
            PushFailed: Si el remote no responde.
        """
        try:
            salida = self._repo.git.ls_remote("--heads", remote, f"refs/heads/{name}")
        except gitpython.GitCommandError as e:
            raise PushFailed(f"No se pudo consultar el remote '{remote}'", cause=e) from e
        for linea in salida.splitlines():
            sha, _, ref = linea.partition("\t")
            if ref.strip() == f"refs/heads/{name}":
                return sha.strip()
        return None

    def remote_branch_exists(self, remote: str, name: str) -> bool:
        return self.remote_branch_sha(remote, name) is not None

    def tracked_files(self) -> list[str]:
        """Archivos en el index del branch actual (rutas POSIX)."""
        salida = self._repo.git.ls_files("-z")
        return sorted(f for f in salida.split("\0") if f)

    def has_staged_changes(self) -> bool:
        """
        ¿Hay diferencias entre el index y HEAD?

        En un branch huérfano sin commits, cualquier archivo en el
        index cuenta como cambio.
        """
        if not self.has_commits():
            return bool(self.tracked_files())
        salida = self._repo.git.diff("--cached", "--name-only")
        return bool(salida.strip())

    def head_sha(self) -> str:
        return self._repo.head.commit.hexsha

    # ============================================================
    # Branches
    # ============================================================

    def create_orphan_branch(self, name: str) -> None:
        """
        Crea `name` sin historia y deja el index vacío.

        Los archivos trackeados del branch anterior se borran del
        working tree; los ignorados y untracked se quedan donde están.
        """
        try:
            self._repo.git.checkout("--orphan", name)
            self._repo.git.rm("-r", "-f", "-q", "--ignore-unmatch", "--", ".")
        except gitpython.GitCommandError as e:
            raise BranchOperationFailed(
                f"No se pudo crear el branch huérfano '{name}'", cause=e
            ) from e
        logger.info(f"Branch huérfano creado: {name}")

    def checkout(self, name: str) -> None:
        try:
            self._repo.git.checkout(name)
        except gitpython.GitCommandError as e:
            raise BranchOperationFailed(
                f"No se pudo cambiar al branch '{name}'", cause=e
            ) from e

    def track_remote_branch(self, remote: str, name: str) -> None:
        """Trae `remote/name` y crea el branch local que lo sigue."""
        try:
            self._repo.remote(remote).fetch(
                f"refs/heads/{name}:refs/remotes/{remote}/{name}"
            )
            self._repo.git.checkout("-b", name, "--track", f"{remote}/{name}")
        except gitpython.GitCommandError as e:
            raise BranchOperationFailed(
                f"No se pudo traer el branch '{remote}/{name}'", cause=e
            ) from e
        logger.info(f"Branch local creado desde {remote}/{name}")

    def restore(self, ref: str) -> None:
        """
        Vuelve al branch (o commit) original. Nunca lanza excepciones.

        Usa --force: lo único que puede quedar sin commit en este punto
        es el espejo a medio hacer del branch destino.
        """
        try:
            self._repo.git.checkout("--force", ref)
        except gitpython.GitCommandError as e:
            logger.warning(f"No se pudo volver a '{ref}': {e.stderr.strip() or e}")
            return
        logger.info(f"De vuelta en {ref}")

    # ============================================================
    # Index, commit, push
    # ============================================================

    def stage_all(self, paths: list[str]) -> None:
        """
        Agrega `paths` al index, aunque .gitignore los excluya.

        Los borrados se registran con remove().
        """
        try:
            for lote in _batches(paths):
                self._repo.git.add("--force", "--", *lote)
        except gitpython.GitCommandError as e:
            raise BranchOperationFailed("git add falló", cause=e) from e

    def remove(self, paths: list[str]) -> None:
        """Quita `paths` del index (ya borrados del disco)."""
        try:
            for lote in _batches(paths):
                self._repo.git.rm(
                    "--cached", "-q", "-r", "--ignore-unmatch", "--", *lote
                )
        except gitpython.GitCommandError as e:
            raise BranchOperationFailed("git rm falló", cause=e) from e

    def commit(self, message: str) -> str:
        """Hace commit de lo que hay en el index y retorna el sha."""
        try:
            self._repo.git.commit("-m", message)
        except gitpython.GitCommandError as e:
            raise BranchOperationFailed("git commit falló", cause=e) from e
        sha = self.head_sha()
        logger.info(f"Commit creado: {sha[:7]} — {message}")
        return sha

    def push(self, remote: str, branch: str) -> None:
        """
        Push de `branch` a `remote`, creando el branch remoto si falta.

        Nunca usa --force: si el remote avanzó, el push se rechaza.

        Raises:
            PushFailed: remote inaccesible, auth rechazada o push rechazado.
        """
        try:
            self._repo.git.push(
                "--set-upstream", remote, f"refs/heads/{branch}:refs/heads/{branch}"
            )
        except gitpython.GitCommandError as e:
            raise PushFailed(
                f"git push a {remote}/{branch} falló", cause=e
            ) from e
