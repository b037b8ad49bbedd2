"""
cli.py — Punto de entrada de pagespush.

Un solo comando, sin argumentos: se ejecuta desde la raíz del
proyecto y publica dist/ en gh-pages del remote origin.

    pagespush               → publica
    pagespush --version     → muestra la versión

Códigos de salida:
    0 → publicado, o ya estaba al día
    1 → cualquier precondición o error de publicación (mensaje en stderr)

Uso desde código (testing):
    from click.testing import CliRunner
    from pagespush.cli import main
    CliRunner().invoke(main, [])
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.panel import Panel

from pagespush import __version__
from pagespush.config import load_config
from pagespush.publishing.errors import PublishError
from pagespush.publishing.publisher import Publisher, PublishResult
from pagespush.utils.logger import console as rich_console
from pagespush.utils.logger import get_logger, reset_file_logger

logger = get_logger("pagespush.cli")


@click.command()
@click.version_option(version=__version__, prog_name="pagespush")
def main():
    """Publica la carpeta dist/ en el branch gh-pages y hace push."""
    proyecto = Path.cwd()

    try:
        config = load_config(proyecto)
        # .env pudo definir PAGESPUSH_LOG_FILE
        reset_file_logger()
        if config.log_file:
            logger.info(f"Log en {config.log_file}")

        result = Publisher(proyecto, config).publish()
        _show_summary(result)

    except PublishError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error inesperado: {e}")
        sys.exit(1)


# ============================================================
# Funciones auxiliares (privadas)
# ============================================================

def _show_summary(result: PublishResult) -> None:
    """Muestra resumen después de publicar."""
    if not result.pushed:
        rich_console.print(Panel(
            result.message,
            title="Sin cambios",
            border_style="cyan",
        ))
        return

    rich_console.print(Panel(
        f"[bold]Branch:[/bold] {result.remote}/{result.branch}\n"
        f"[bold]Commit:[/bold] {result.commit_sha[:7]}"
        f"{'' if result.committed else ' (push pendiente)'}\n"
        f"[bold]Archivos:[/bold] {result.files_published}\n"
        f"[bold]Branch nuevo:[/bold] {'sí' if result.created_branch else 'no'}",
        title="Publicado",
        border_style="green",
    ))


if __name__ == "__main__":
    main()
