"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(fake_renderer, project_tree):
        executor = make_executor(fake_renderer)
        ...
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from mdpress.config import RuntimeConfig
from mdpress.config import runtime_config as runtime_config_module
from mdpress.interfaces import IPDFRenderer, RenderError
from mdpress.pipeline import OutputPublisher, RenderExecutor
from mdpress.render import SourceResolver

# 1x1 透明 PNG
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def default_config(monkeypatch: pytest.MonkeyPatch) -> RuntimeConfig:
    """每个测试使用默认运行期配置（不读取工作目录下的 mdpress.yaml）"""
    config = RuntimeConfig()
    monkeypatch.setattr(runtime_config_module, "_config", config)
    return config


# ============================================================================
# 假渲染器
# ============================================================================

class FakeRenderer(IPDFRenderer):
    """把 HTML 原样写到目标路径，记录调用；fail_on 中的文件名渲染失败"""

    def __init__(self, fail_on: tuple[str, ...] = ()):
        self.calls: list[tuple[str, Path]] = []
        self.fail_on = fail_on

    def render(self, html: str, output_path: Path) -> None:
        if output_path.name in self.fail_on:
            raise RenderError(f"模拟渲染失败: {output_path.name}")
        self.calls.append((html, output_path))
        output_path.write_text(html, encoding="utf-8")

    def html_for(self, name: str) -> str:
        for html, path in self.calls:
            if path.name == name:
                return html
        raise KeyError(name)


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def failing_renderer() -> Callable[..., FakeRenderer]:
    """按文件名指定渲染失败的假渲染器"""
    return lambda *names: FakeRenderer(fail_on=names)


@pytest.fixture
def make_executor() -> Callable[..., RenderExecutor]:
    """使用指定渲染器的执行器工厂"""

    def factory(renderer: IPDFRenderer, root: Path | None = None) -> RenderExecutor:
        return RenderExecutor(
            resolver=SourceResolver(root) if root else None,
            publisher=OutputPublisher(renderer=renderer),
        )

    return factory


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """切换到临时目录作为工作目录（glob 与输出路径均相对于它）"""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def project_tree(workdir: Path) -> Path:
    """
    示例源码树：

        projects/alpha/README.md   (含本地图片 + src 目录)
        projects/alpha/diagram.png
        projects/alpha/src/main.py
        projects/alpha/src/pkg/util.py
        projects/beta/README.md
        projects/beta/notes.md
    """
    alpha = workdir / "projects" / "alpha"
    beta = workdir / "projects" / "beta"
    (alpha / "src" / "pkg").mkdir(parents=True)
    beta.mkdir(parents=True)

    (alpha / "README.md").write_text(
        "# Alpha\n\nSee the diagram:\n\n![diagram](diagram.png)\n", encoding="utf-8"
    )
    (alpha / "diagram.png").write_bytes(PNG_BYTES)
    (alpha / "src" / "main.py").write_text("print('alpha')\n", encoding="utf-8")
    (alpha / "src" / "pkg" / "util.py").write_text("X = 1\n", encoding="utf-8")

    (beta / "README.md").write_text("# Beta\n\nBeta body.\n", encoding="utf-8")
    (beta / "notes.md").write_text("notes\n", encoding="utf-8")
    return workdir


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES
