"""
errors.py — Taxonomía de errores de pagespush.

    PublishError
    ├── NotARepository          → el directorio no está dentro de un repo git
    ├── MissingBuildOutput      → dist/ no existe o no tiene archivos
    ├── ConfigurationError      → algún valor PAGESPUSH_* es inválido
    └── PublishFailed           → falló una operación de git
        ├── BranchOperationFailed  → crear/cambiar branch, stage, commit
        └── PushFailed             → remote inaccesible, auth, push rechazado

Todos son terminales: ninguno se reintenta. La causa original
(normalmente un git.GitCommandError) queda en `cause`.
"""

from __future__ import annotations


class PublishError(RuntimeError):
    """Error base de pagespush."""

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        detalle = str(self.cause).strip()
        if not detalle:
            return self.message
        return f"{self.message}\n  causa: {detalle}"


class NotARepository(PublishError):
    pass


class MissingBuildOutput(PublishError):
    pass


class ConfigurationError(PublishError):
    pass


class PublishFailed(PublishError):
    """Una operación de git falló durante la publicación."""


class BranchOperationFailed(PublishFailed):
    pass


class PushFailed(PublishFailed):
    pass
