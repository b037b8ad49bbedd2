"""
publisher.py — Publica dist/ en el branch gh-pages.

Flujo completo de publish():
    0. Precondiciones: repo git, dist/ con archivos, remote
       configurado, repo con commits y sin cambios pendientes
    1. ¿Existe el branch destino (local o en el remote)?
    2. Snapshot de dist/ dentro de .git (sobrevive al checkout)
    3. Crear branch huérfano / traerlo del remote / cambiar a él
    4. Espejo: borrar archivos viejos, copiar el build, git add
    5. Sin cambios → sin commit; push solo si el remote quedó atrás
    6. git commit
    7. git push --set-upstream (nunca --force)
    8. Volver al branch original (siempre, incluso si algo falla)

Ninguna precondición fallida toca el repositorio.

Uso:
    from pagespush.publishing.publisher import Publisher
    result = Publisher(Path.cwd()).publish()
    print(result.message)
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from pagespush.config import PublishConfig
from pagespush.publishing.errors import (
    BranchOperationFailed,
    MissingBuildOutput,
    PushFailed,
)
from pagespush.publishing.git_ops import GitOperations
from pagespush.publishing.mirror import collect_files, mirror_into, snapshot
from pagespush.utils.logger import get_logger

logger = get_logger("pagespush.publisher")

TOTAL_STEPS = 8


@dataclass(frozen=True)
class PublishResult:
    """
    Resultado de una publicación.

    Campos:
        branch: Branch destino
        remote: Remote al que se hizo push
        commit_sha: Sha publicado (None si no hubo nada que publicar)
        committed: Si se creó un commit
        pushed: Si se hizo push
        created_branch: Si el branch se creó en esta ejecución
        files_published: Cantidad de archivos en el branch
        message: Resumen legible
    """
    branch: str
    remote: str
    commit_sha: str | None
    committed: bool
    pushed: bool
    created_branch: bool
    files_published: int
    message: str


class Publisher:
    """
    Publica la carpeta de build de un proyecto en un branch aparte.

    Args:
        project_dir: Raíz del proyecto (donde vive dist/).
        config: Convenciones a usar. Por defecto dist → gh-pages en origin.
    """

    def __init__(self, project_dir: str | Path, config: PublishConfig | None = None):
        self._project_dir = Path(project_dir).resolve()
        self._config = config or PublishConfig()

    @property
    def source_dir(self) -> Path:
        return self._project_dir / self._config.source_dir

    # ============================================================
    # Precondiciones
    # ============================================================

    def _check_build_output(self) -> list[str]:
        source = self.source_dir
        if not source.is_dir():
            raise MissingBuildOutput(
                f"No existe la carpeta de build: {source}\n"
                "Genera el sitio antes de publicar."
            )
        archivos = collect_files(source)
        if not archivos:
            raise MissingBuildOutput(f"La carpeta de build está vacía: {source}")
        return archivos

    def _check_repository(self, git: GitOperations) -> None:
        cfg = self._config
        if not git.has_remote(cfg.remote):
            raise PushFailed(f"El remote '{cfg.remote}' no está configurado")
        if not git.has_commits():
            raise BranchOperationFailed(
                "El repositorio no tiene commits todavía; "
                "haz un primer commit antes de publicar."
            )
        if git.is_dirty():
            raise BranchOperationFailed(
                "Hay cambios sin commit en archivos trackeados.\n"
                "Haz commit o stash antes de publicar para no perder trabajo "
                "al cambiar de branch."
            )

    # ============================================================
    # Publicación
    # ============================================================

    def publish(self) -> PublishResult:
        """
        Publica la carpeta de build en el branch destino.

        Returns:
            PublishResult con el detalle de lo que pasó.

        Raises:
            NotARepository: Si el proyecto no está en un repo git.
            MissingBuildOutput: Si la carpeta de build falta o está vacía.
            BranchOperationFailed: Si falla crear/cambiar branch o el commit.
            PushFailed: Si falta el remote o el push falla.
        """
        cfg = self._config

        git = GitOperations.open(self._project_dir)
        self._check_build_output()
        self._check_repository(git)

        original = git.current_ref()
        if original == cfg.branch:
            raise BranchOperationFailed(
                f"Ya estás en '{cfg.branch}'; cambia al branch de trabajo primero."
            )
        mensaje = cfg.format_commit_message(
            datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        )
        logger.info(
            f"Publicando {cfg.source_dir}/ → {cfg.remote}/{cfg.branch} "
            f"({git.remote_url(cfg.remote)})"
        )

        logger.step(1, TOTAL_STEPS, f"Buscando el branch '{cfg.branch}'")
        existe_local = git.branch_exists(cfg.branch)
        existe_remoto = False if existe_local else git.remote_branch_exists(
            cfg.remote, cfg.branch
        )

        with tempfile.TemporaryDirectory(
            prefix="pagespush-", dir=git.git_dir
        ) as tmp:
            snapshot_dir = Path(tmp)
            logger.step(2, TOTAL_STEPS, f"Copiando {cfg.source_dir}/ a un snapshot")
            archivos = snapshot(self.source_dir, snapshot_dir)

            try:
                return self._publish_snapshot(
                    git, snapshot_dir, archivos, existe_local, existe_remoto, mensaje
                )
            finally:
                logger.step(8, TOTAL_STEPS, f"Volviendo a '{original}'")
                git.restore(original)

    def _publish_snapshot(
        self,
        git: GitOperations,
        snapshot_dir: Path,
        archivos: list[str],
        existe_local: bool,
        existe_remoto: bool,
        mensaje: str,
    ) -> PublishResult:
        cfg = self._config

        # Paso 3: posicionarse en el branch destino
        creado = False
        if existe_local:
            logger.step(3, TOTAL_STEPS, f"Cambiando a '{cfg.branch}'")
            git.checkout(cfg.branch)
        elif existe_remoto:
            logger.step(3, TOTAL_STEPS, f"Trayendo '{cfg.remote}/{cfg.branch}'")
            git.track_remote_branch(cfg.remote, cfg.branch)
        else:
            logger.step(3, TOTAL_STEPS, f"Creando branch huérfano '{cfg.branch}'")
            git.create_orphan_branch(cfg.branch)
            creado = True

        # Paso 4: espejo + stage
        logger.step(4, TOTAL_STEPS, "Reemplazando el contenido del branch")
        copiados, borrados = mirror_into(
            snapshot_dir, archivos, git.working_tree, git.tracked_files()
        )
        git.remove(borrados)
        git.stage_all(copiados)

        # Paso 5: ¿hay algo nuevo?
        logger.step(5, TOTAL_STEPS, "Buscando cambios")
        if not git.has_staged_changes():
            return self._push_pending(git, len(copiados))

        # Paso 6: commit
        logger.step(6, TOTAL_STEPS, f"Commit: {mensaje}")
        sha = git.commit(mensaje)

        # Paso 7: push
        logger.step(7, TOTAL_STEPS, f"Push a {cfg.remote}/{cfg.branch}")
        git.push(cfg.remote, cfg.branch)
        logger.success(f"Publicado en {cfg.remote}/{cfg.branch} ({sha[:7]})")

        return PublishResult(
            branch=cfg.branch,
            remote=cfg.remote,
            commit_sha=sha,
            committed=True,
            pushed=True,
            created_branch=creado,
            files_published=len(copiados),
            message=f"Publicado en {cfg.remote}/{cfg.branch} en {sha[:7]}",
        )

    def _push_pending(self, git: GitOperations, archivos: int) -> PublishResult:
        """
        Sin commit nuevo: solo hace push si el remote no tiene el branch local.

        Cubre el reintento después de un push fallido, donde el commit
        ya existe localmente pero nunca llegó al remote.
        """
        cfg = self._config
        local = git.head_sha()
        if git.remote_branch_sha(cfg.remote, cfg.branch) == local:
            logger.success(f"'{cfg.branch}' ya está al día; nada que publicar")
            return PublishResult(
                branch=cfg.branch,
                remote=cfg.remote,
                commit_sha=None,
                committed=False,
                pushed=False,
                created_branch=False,
                files_published=archivos,
                message=f"Sin cambios: {cfg.branch} ya refleja {cfg.source_dir}/",
            )

        logger.step(7, TOTAL_STEPS, f"Push pendiente a {cfg.remote}/{cfg.branch}")
        git.push(cfg.remote, cfg.branch)
        logger.success(f"Publicado en {cfg.remote}/{cfg.branch} ({local[:7]})")
        return PublishResult(
            branch=cfg.branch,
            remote=cfg.remote,
            commit_sha=local,
            committed=False,
            pushed=True,
            created_branch=False,
            files_published=archivos,
            message=f"Push pendiente completado: {cfg.remote}/{cfg.branch} en {local[:7]}",
        )


def publish(
    project_dir: str | Path | None = None,
    config: PublishConfig | None = None,
) -> PublishResult:
    """Atajo: publica el proyecto en `project_dir` (o el directorio actual)."""
    return Publisher(project_dir or Path.cwd(), config).publish()
