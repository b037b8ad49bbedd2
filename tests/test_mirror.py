"""
test_mirror.py — Tests de la copia espejo (sin git).

Verificamos que:
1. collect_files ignora directorios vacíos, componentes .git y symlinks a carpetas
2. mirror_into borra lo viejo y copia lo nuevo
3. Los archivos no trackeados nunca se borran
"""

import os

import pytest

from conftest import write_files
from pagespush.publishing.mirror import (
    collect_files,
    mirror_into,
    snapshot,
    stale_files,
)


@pytest.fixture
def build(tmp_path):
    """Build de ejemplo con subdirectorios."""
    source = tmp_path / "dist"
    write_files(source, {
        "index.html": "<h1>hola</h1>",
        "css/site.css": "body {}",
        "blog/2026/post.html": "<p>post</p>",
    })
    (source / "vacio").mkdir()
    return source


class TestCollectFiles:

    def test_rutas_relativas_ordenadas(self, build):
        assert collect_files(build) == [
            "blog/2026/post.html",
            "css/site.css",
            "index.html",
        ]

    def test_omite_git(self, build):
        write_files(build, {".git/HEAD": "ref", "sub/.git": "gitdir: x"})
        assert collect_files(build) == [
            "blog/2026/post.html",
            "css/site.css",
            "index.html",
        ]

    def test_carpeta_sin_archivos(self, tmp_path):
        (tmp_path / "dist" / "a" / "b").mkdir(parents=True)
        assert collect_files(tmp_path / "dist") == []

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="sin soporte de symlinks")
    def test_symlink_a_directorio_avisa(self, build, tmp_path, capsys):
        """Un enlace a carpeta no se sigue, pero tampoco se omite en silencio."""
        externo = tmp_path / "externo"
        write_files(externo, {"fuera.html": "x"})
        os.symlink(externo, build / "enlace", target_is_directory=True)

        assert collect_files(build) == [
            "blog/2026/post.html",
            "css/site.css",
            "index.html",
        ]
        assert "symlink" in capsys.readouterr().err


class TestSnapshot:

    def test_copia_todo(self, build, tmp_path):
        destino = tmp_path / "snap"
        destino.mkdir()
        archivos = snapshot(build, destino)
        assert archivos == collect_files(build)
        assert (destino / "blog" / "2026" / "post.html").read_text() == "<p>post</p>"
        assert not (destino / "vacio").exists()


class TestStaleFiles:

    def test_solo_los_que_sobran(self):
        assert stale_files(["a.html", "b.html", "c/d.css"], ["a.html"]) == [
            "b.html",
            "c/d.css",
        ]

    def test_nada_que_borrar(self):
        assert stale_files(["a.html"], ["a.html", "b.html"]) == []


class TestMirrorInto:

    def test_espejo_completo(self, build, tmp_path):
        worktree = tmp_path / "wt"
        write_files(worktree, {
            "old.html": "viejo",
            "legacy/deep/page.html": "viejo",
            "index.html": "version vieja",
        })
        tracked = ["index.html", "legacy/deep/page.html", "old.html"]

        copiados, borrados = mirror_into(build, collect_files(build), worktree, tracked)

        assert borrados == ["legacy/deep/page.html", "old.html"]
        assert len(copiados) == 3
        assert not (worktree / "old.html").exists()
        assert not (worktree / "legacy").exists()
        assert (worktree / "index.html").read_text() == "<h1>hola</h1>"
        assert (worktree / "css" / "site.css").exists()

    def test_respeta_no_trackeados(self, build, tmp_path):
        worktree = tmp_path / "wt"
        write_files(worktree, {".env": "SECRET=1", "node_modules/x.js": "x"})

        mirror_into(build, collect_files(build), worktree, tracked=[])

        assert (worktree / ".env").read_text() == "SECRET=1"
        assert (worktree / "node_modules" / "x.js").exists()

    def test_archivo_que_ahora_es_directorio(self, tmp_path):
        """'docs' era un archivo y ahora es una carpeta del build."""
        source = tmp_path / "dist"
        write_files(source, {"docs/index.html": "nuevo"})
        worktree = tmp_path / "wt"
        write_files(worktree, {"docs": "era archivo"})

        mirror_into(source, collect_files(source), worktree, tracked=["docs"])

        assert (worktree / "docs" / "index.html").read_text() == "nuevo"

    def test_directorio_que_ahora_es_archivo(self, tmp_path):
        source = tmp_path / "dist"
        write_files(source, {"docs": "ahora archivo"})
        worktree = tmp_path / "wt"
        write_files(worktree, {"docs/index.html": "viejo"})

        mirror_into(
            source, collect_files(source), worktree, tracked=["docs/index.html"]
        )

        assert (worktree / "docs").read_text() == "ahora archivo"
