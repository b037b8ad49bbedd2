"""
conftest.py — Fixtures compartidas: repos git reales en tmp_path.

Cada test recibe un proyecto con:
- un commit inicial en main (README.md + .gitignore que ignora dist/)
- un remote "origin" que apunta a un repo bare local
"""

from __future__ import annotations

import os
from pathlib import Path

import git
import pytest


def configure_identity(repo: git.Repo) -> None:
    """Identidad local para que git commit funcione en CI."""
    with repo.config_writer() as cw:
        cw.set_value("user", "name", "Test Publisher")
        cw.set_value("user", "email", "publisher@example.com")
        cw.set_value("commit", "gpgsign", "false")


def write_files(base: Path, files: dict[str, str]) -> None:
    """Escribe {ruta_relativa: contenido} bajo `base`."""
    for relativa, contenido in files.items():
        ruta = base / relativa
        ruta.parent.mkdir(parents=True, exist_ok=True)
        ruta.write_text(contenido, encoding="utf-8")


def branch_files(repo: git.Repo, branch: str) -> set[str]:
    """Archivos trackeados en `branch` (sirve en repos bare)."""
    salida = repo.git.ls_tree("-r", "--name-only", branch)
    return {line for line in salida.splitlines() if line}


def commit_count(repo: git.Repo, branch: str) -> int:
    return int(repo.git.rev_list("--count", branch))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Ningún PAGESPUSH_* del entorno real se cuela en los tests."""
    for name in list(os.environ):
        if name.startswith("PAGESPUSH_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def remote_repo(tmp_path) -> git.Repo:
    """Repo bare que hace de origin."""
    return git.Repo.init(tmp_path / "remote.git", bare=True)


@pytest.fixture
def project_repo(tmp_path, remote_repo) -> git.Repo:
    """Proyecto con un commit en main y origin configurado."""
    path = tmp_path / "project"
    repo = git.Repo.init(path)
    repo.git.symbolic_ref("HEAD", "refs/heads/main")
    configure_identity(repo)

    write_files(path, {
        "README.md": "# Mi proyecto\n",
        ".gitignore": "dist/\nlocal.secret\n",
        "src/app.js": "console.log('hola');\n",
    })
    repo.git.add("--", "README.md", ".gitignore", "src/app.js")
    repo.git.commit("-m", "Initial commit")
    repo.create_remote("origin", str(remote_repo.git_dir))
    return repo


@pytest.fixture
def project(project_repo) -> Path:
    """Ruta del proyecto (working tree)."""
    return Path(project_repo.working_tree_dir)


@pytest.fixture
def dist(project) -> Path:
    """Carpeta dist/ con un build mínimo."""
    dist_dir = project / "dist"
    write_files(dist_dir, {
        "index.html": "<h1>Hola</h1>\n",
        "style.css": "body { color: black; }\n",
    })
    return dist_dir
