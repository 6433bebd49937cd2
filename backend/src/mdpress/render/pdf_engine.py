"""
PDF渲染引擎 - 完整HTML文档导出PDF

职责：
1. 通过 Playwright 驱动无头 Chromium 打印PDF（优先）
2. Chromium 命令行 --print-to-pdf（兜底方案）
3. 纸张/边距/背景按运行期配置，渲染有超时上限
4. 临时HTML文件在任何退出路径上都被删除

依赖：
- playwright: 无头浏览器驱动（优先）
- chromium: 兜底方案（CHROME_BIN 或 PATH 中的 chromium/google-chrome）

测试要点：
- test_render_via_chromium: 命令行渲染
- test_render_timeout: 超时不降级
- test_temp_file_removed: 临时文件清理
- test_fallback_engine: 优先引擎不可用时降级
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from ..config import get_config
from ..config.runtime_config import PDFConfig
from ..fsutil import write_bytes_atomic
from ..interfaces import IPDFRenderer, RenderError, RenderTimeoutError

logger = logging.getLogger(__name__)

# 本地文件需要互相访问（file:// 下的图片/样式）
CHROMIUM_ARGS = [
    "--disable-gpu",
    "--no-sandbox",
    "--allow-file-access-from-files",
    "--disable-web-security",
]

CHROMIUM_CANDIDATES = ("chromium", "chromium-browser", "google-chrome", "google-chrome-stable")

HEAD_TAG_RE = re.compile(r"<head(?:\s[^>]*)?>", re.IGNORECASE)


@contextmanager
def temp_html(html: str) -> Iterator[Path]:
    """写入临时HTML文件，退出时删除"""
    fd, name = tempfile.mkstemp(prefix="mdpress-", suffix=".html")
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(html)
        yield path
    finally:
        path.unlink(missing_ok=True)


class PDFRenderer(IPDFRenderer):
    """PDF渲染器实现"""

    def __init__(
        self,
        preferred_engine: str | None = None,
        options: PDFConfig | None = None,
        timeout: int | None = None,
    ):
        config = get_config()
        self.options = options or config.pdf
        self.preferred = preferred_engine or self.options.preferred
        self.fallback = self.options.fallback
        self.timeout = timeout or config.timeouts.render_sec

    def render(self, html: str, output_path: Path) -> None:
        """HTML导出PDF"""
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RenderError(f"无法创建输出目录 {output_path.parent}: {e}") from e

        pdf_bytes = self._render_with_engines(html)

        try:
            write_bytes_atomic(output_path, pdf_bytes)
        except OSError as e:
            raise RenderError(f"PDF写出失败 {output_path}: {e}") from e
        logger.info(f"已写出: {output_path}")

    def _engines(self) -> dict[str, Callable[[str], bytes]]:
        return {
            "playwright": self._render_via_playwright,
            "chromium": self._render_via_chromium,
        }

    def _render_with_engines(self, html: str) -> bytes:
        """优先引擎失败时降级（超时直接失败）"""
        names = [self.preferred]
        if self.fallback and self.fallback != self.preferred:
            names.append(self.fallback)

        engines = self._engines()
        errors: list[str] = []
        for name in names:
            engine = engines.get(name)
            if engine is None:
                errors.append(f"未知PDF引擎: {name}")
                continue
            try:
                return engine(html)
            except RenderTimeoutError:
                raise
            except RenderError as e:
                logger.warning(f"PDF引擎 {name} 失败: {e}")
                errors.append(f"{name}: {e}")

        raise RenderError("无可用的PDF引擎: " + "; ".join(errors))

    def _render_via_playwright(self, html: str) -> bytes:
        """通过 Playwright 打印PDF"""
        opts = self.options
        timeout_ms = self.timeout * 1000

        with temp_html(html) as html_path:
            try:
                with sync_playwright() as p:
                    browser = p.chromium.launch(
                        executable_path=opts.chrome_bin or None,
                        args=CHROMIUM_ARGS,
                        timeout=timeout_ms,
                    )
                    try:
                        page = browser.new_page()
                        page.set_default_timeout(timeout_ms)
                        page.goto(html_path.as_uri(), wait_until="load")
                        page.wait_for_timeout(opts.settle_ms)
                        return page.pdf(
                            width=f"{opts.paper_width}in",
                            height=f"{opts.paper_height}in",
                            margin={
                                "top": f"{opts.margin_top}in",
                                "bottom": f"{opts.margin_bottom}in",
                                "left": f"{opts.margin_left}in",
                                "right": f"{opts.margin_right}in",
                            },
                            print_background=opts.print_background,
                            prefer_css_page_size=opts.prefer_css_page_size,
                        )
                    finally:
                        browser.close()
            except PlaywrightTimeoutError as e:
                raise RenderTimeoutError(f"Playwright渲染超时({self.timeout}s): {e}") from e
            except PlaywrightError as e:
                raise RenderError(f"Playwright渲染失败: {e}") from e

    def _render_via_chromium(self, html: str) -> bytes:
        """通过 Chromium 命令行打印PDF（纸张/边距由注入的 @page 样式控制）"""
        exe = self._find_chromium()

        with temp_html(self._inject_page_style(html)) as html_path, \
                tempfile.TemporaryDirectory(prefix="mdpress-") as tmpdir:
            pdf_path = Path(tmpdir) / "out.pdf"
            cmd = [
                exe,
                "--headless",
                *CHROMIUM_ARGS,
                "--no-pdf-header-footer",
                f"--virtual-time-budget={self.options.settle_ms}",
                f"--print-to-pdf={pdf_path}",
                html_path.as_uri(),
            ]

            try:
                subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    check=True,
                )
            except subprocess.TimeoutExpired as e:
                raise RenderTimeoutError(f"Chromium渲染超时({self.timeout}s)") from e
            except subprocess.CalledProcessError as e:
                detail = e.stderr or e.stdout or ""
                raise RenderError(f"Chromium渲染失败: {detail}") from e
            except OSError as e:
                raise RenderError(f"Chromium无法启动: {e}") from e

            if not pdf_path.exists():
                raise RenderError(f"Chromium未生成PDF: {exe}")
            return pdf_path.read_bytes()

    def _find_chromium(self) -> str:
        if self.options.chrome_bin:
            return self.options.chrome_bin
        for name in CHROMIUM_CANDIDATES:
            found = shutil.which(name)
            if found:
                return found
        raise RenderError("未找到Chromium可执行文件（可设置 CHROME_BIN）")

    def _inject_page_style(self, html: str) -> str:
        """命令行模式无打印参数，用 @page 样式设定纸张和边距"""
        opts = self.options
        rules = [
            f"@page {{ size: {opts.paper_width}in {opts.paper_height}in; "
            f"margin: {opts.margin_top}in {opts.margin_right}in "
            f"{opts.margin_bottom}in {opts.margin_left}in; }}"
        ]
        if opts.print_background:
            rules.append("html { -webkit-print-color-adjust: exact; print-color-adjust: exact; }")
        style = "<style>" + " ".join(rules) + "</style>"

        m = HEAD_TAG_RE.search(html)
        if m:
            return html[: m.end()] + style + html[m.end():]
        return style + html
