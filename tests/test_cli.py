"""
test_cli.py — Tests del comando pagespush.

El comando no recibe argumentos: se ejecuta desde la raíz del
proyecto y el código de salida indica el resultado.
"""

from click.testing import CliRunner

from conftest import branch_files, commit_count
from pagespush import __version__
from pagespush.cli import main


def run_cli(args=None):
    return CliRunner().invoke(main, args or [])


class TestCli:

    def test_version(self):
        result = run_cli(["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_acepta_argumentos(self):
        result = run_cli(["dist"])
        assert result.exit_code != 0

    def test_publica(self, project, remote_repo, dist, monkeypatch):
        monkeypatch.chdir(project)
        result = run_cli()
        assert result.exit_code == 0, result.output
        assert "Publicado" in result.output
        assert branch_files(remote_repo, "gh-pages") == {"index.html", "style.css"}

    def test_sin_cambios_sale_con_cero(self, project, remote_repo, dist, monkeypatch):
        monkeypatch.chdir(project)
        assert run_cli().exit_code == 0
        result = run_cli()
        assert result.exit_code == 0
        assert "Sin cambios" in result.output
        assert commit_count(remote_repo, "gh-pages") == 1

    def test_sin_dist_sale_con_uno(self, project, monkeypatch):
        monkeypatch.chdir(project)
        result = run_cli()
        assert result.exit_code == 1
        assert "build" in result.output

    def test_fuera_de_repo_sale_con_uno(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = run_cli()
        assert result.exit_code == 1
        assert "repositorio" in result.output

    def test_configuracion_invalida(self, project, dist, monkeypatch):
        monkeypatch.chdir(project)
        monkeypatch.setenv("PAGESPUSH_BRANCH", "no valido")
        result = run_cli()
        assert result.exit_code == 1
        assert "inválida" in result.output

    def test_rama_desde_variable(self, project, project_repo, remote_repo, dist, monkeypatch):
        monkeypatch.chdir(project)
        monkeypatch.setenv("PAGESPUSH_BRANCH", "site")
        result = run_cli()
        assert result.exit_code == 0, result.output
        assert branch_files(remote_repo, "site") == {"index.html", "style.css"}
        assert project_repo.active_branch.name == "main"

    def test_push_pendiente(self, tmp_path, project, project_repo, remote_repo, dist, monkeypatch):
        monkeypatch.chdir(project)
        assert run_cli().exit_code == 0
        (project / "dist" / "index.html").write_text("<h1>v2</h1>", encoding="utf-8")
        project_repo.git.remote("set-url", "origin", str(tmp_path / "no-existe.git"))
        assert run_cli().exit_code == 1

        project_repo.git.remote("set-url", "origin", str(remote_repo.git_dir))
        result = run_cli()
        assert result.exit_code == 0, result.output
        assert "push pendiente" in result.output
        assert commit_count(remote_repo, "gh-pages") == 2

    def test_ya_en_gh_pages_sale_con_uno(self, project, project_repo, dist, monkeypatch):
        monkeypatch.chdir(project)
        assert run_cli().exit_code == 0
        project_repo.git.checkout("gh-pages")
        result = run_cli()
        assert result.exit_code == 1
        assert "gh-pages" in result.output
        assert project_repo.active_branch.name == "gh-pages"
