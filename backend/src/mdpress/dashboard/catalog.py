"""
产物目录输出 - HTML / Markdown 两种编码

职责：
1. HTML 目录：链接相对目录文件自身所在目录
2. Markdown 目录：能发现远程仓库时链接到仓库浏览地址，否则相对路径
3. 目录文件本身不参与扫描，未变化的目录树重复生成结果逐字节一致
4. 整文件替换写入

测试要点：
- test_html_relative_links: HTML 相对链接
- test_markdown_remote_links: Markdown 远程链接
- test_deterministic: 重复生成一致
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from jinja2 import Environment, PackageLoader, select_autoescape

from ..fsutil import write_text_atomic
from ..interfaces import ConfigError
from ..models import CatalogSection, RepoInfo
from .addressing import discover_repository, encode_path, relative_link
from .scanner import scan_outputs

logger = logging.getLogger(__name__)

FORMAT_HTML = "html"
FORMAT_MARKDOWN = "markdown"
FORMAT_BOTH = "both"
FORMATS = (FORMAT_HTML, FORMAT_MARKDOWN, FORMAT_BOTH)


def _md_cell(value: str) -> str:
    """Markdown 表格单元格中的竖线转义"""
    return value.replace("|", "\\|")


def create_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("mdpress", "templates"),
        autoescape=select_autoescape(["html"]),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["md_cell"] = _md_cell
    return env


def catalog_paths(output: Path, fmt: str) -> list[Path]:
    """按格式得到要写出的目录文件路径（扩展名由格式决定）"""
    if fmt not in FORMATS:
        raise ConfigError(f"未知目录格式: {fmt}（可选 {', '.join(FORMATS)}）")
    paths = []
    if fmt in (FORMAT_HTML, FORMAT_BOTH):
        paths.append(output.with_suffix(".html"))
    if fmt in (FORMAT_MARKDOWN, FORMAT_BOTH):
        paths.append(output.with_suffix(".md"))
    return paths


class CatalogWriter:
    """目录写出器"""

    def __init__(self, env: Environment | None = None):
        self.env = env or create_environment()

    def write_html(self, sections: list[CatalogSection], source: Path, html_path: Path) -> Path:
        """HTML 目录（相对链接）"""
        start = html_path.parent
        rows = [
            {
                "folder": section.folder,
                "files": [
                    {
                        "name": entry.name,
                        "link": relative_link(source / entry.path, start),
                        "archive": relative_link(source / entry.archive, start) if entry.archive else None,
                    }
                    for entry in section.files
                ],
            }
            for section in sections
        ]
        text = self.env.get_template("dashboard.html").render(sections=rows)
        write_text_atomic(html_path, text)
        logger.info(f"目录已写出: {html_path}")
        return html_path

    def write_markdown(
        self,
        sections: list[CatalogSection],
        source: Path,
        md_path: Path,
        repo: RepoInfo | None = None,
    ) -> Path:
        """Markdown 目录（有远程仓库时用仓库地址）"""
        start = md_path.parent

        def link(rel: str) -> str:
            target = source / rel
            if repo is not None:
                return repo.browse_url(encode_path(os.path.relpath(target)))
            return relative_link(target, start)

        rows = [
            {
                "folder": section.folder,
                "files": [
                    {
                        "name": entry.name,
                        "link": link(entry.path),
                        "archive": link(entry.archive) if entry.archive else None,
                    }
                    for entry in section.files
                ],
            }
            for section in sections
        ]
        text = self.env.get_template("dashboard.md").render(sections=rows)
        write_text_atomic(md_path, text)
        logger.info(f"Markdown 目录已写出: {md_path}")
        return md_path


def build_catalog(
    source: Path,
    output: Path,
    fmt: str = FORMAT_BOTH,
    use_remote: bool = True,
    repo: RepoInfo | None = None,
) -> list[Path]:
    """扫描 source 并写出目录文件，返回写出的路径"""
    targets = catalog_paths(output, fmt)
    if not source.is_dir():
        raise ConfigError(f"扫描目录不存在: {source}")

    sections = scan_outputs(source, exclude=targets)
    writer = CatalogWriter()

    written = []
    for target in targets:
        if target.suffix == ".html":
            written.append(writer.write_html(sections, source, target))
        else:
            if repo is None and use_remote:
                repo = discover_repository()
            written.append(writer.write_markdown(sections, source, target, repo))
    return written
