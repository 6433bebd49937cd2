"""
命令行入口单元测试
"""

from pathlib import Path

import pytest

from mdpress import cli


class TestRenderCommand:
    """render 子命令测试"""

    def test_success(self, project_tree: Path, fake_renderer, make_executor, monkeypatch: pytest.MonkeyPatch):
        """测试全部任务成功返回 0"""
        monkeypatch.setattr(cli, "RenderExecutor", lambda: make_executor(fake_renderer))
        Path("render.yaml").write_text(
            "- {source: 'projects/**/README.md', output: output/projects, type: subfolders}\n",
            encoding="utf-8",
        )
        assert cli.main(["render"]) == 0
        assert Path("output/projects/alpha.pdf").exists()

    def test_job_failure_exit_code(self, project_tree: Path, fake_renderer, make_executor, monkeypatch: pytest.MonkeyPatch):
        """测试任一任务失败返回 1"""
        monkeypatch.setattr(cli, "RenderExecutor", lambda: make_executor(fake_renderer))
        config = Path("jobs.yaml")
        config.write_text(
            "- {source: 'missing/*.md', output: out/a.pdf, type: single}\n"
            "- {source: 'projects/beta/*.md', output: out/b.pdf, type: single}\n",
            encoding="utf-8",
        )
        assert cli.main(["render", "--config", str(config)]) == 1
        assert Path("out/b.pdf").exists()

    def test_config_error_exit_code(self, workdir: Path):
        """测试配置错误返回 1"""
        assert cli.main(["render", "--config", "absent.yaml"]) == 1


class TestDashboardCommand:
    """dashboard 子命令测试"""

    def test_dashboard(self, workdir: Path, capsys: pytest.CaptureFixture):
        (workdir / "output").mkdir()
        (workdir / "output" / "a.pdf").write_bytes(b"x")

        code = cli.main(["dashboard", "--format", "html", "--output", "output/index.html"])
        assert code == 0
        assert Path("output/index.html").exists()
        assert "index.html" in capsys.readouterr().out

    def test_missing_source(self, workdir: Path):
        assert cli.main(["dashboard", "--source", "absent", "--no-remote"]) == 1
