"""
文档模型 - 逻辑文档、图片引用与渲染产物
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


MARKDOWN_SUFFIXES = (".md", ".markdown")
HTML_SUFFIXES = (".html", ".htm")


def is_markdown_path(path: Path | str) -> bool:
    """按扩展名判断是否为 Markdown 源"""
    return Path(path).suffix.lower() in MARKDOWN_SUFFIXES


def is_html_path(path: Path | str) -> bool:
    """按扩展名判断是否为 HTML 源"""
    return Path(path).suffix.lower() in HTML_SUFFIXES


class AssetKind(str, Enum):
    """图片引用分类"""
    INLINE_DATA = "inline_data"   # 已内嵌 data: URL，跳过
    REMOTE = "remote"             # http(s) 绝对地址，跳过
    LOCAL = "local"               # 本地相对路径，内嵌


class LogicalDocument(BaseModel):
    """一次渲染的组合内容"""
    name: str = Field(..., description="产物名（不含扩展名），兼作默认标题")
    content: str
    base_dir: Path = Field(..., description="相对图片路径的解析基准")
    output_path: Path
    sources: list[Path] = Field(default_factory=list)
    is_markdown: bool = True

    # subfolders 任务：标记文件所在目录，其 src 子目录用于生成配套压缩包
    companion_folder: Path | None = None

    @property
    def title(self) -> str:
        return self.name


class SkippedSource(BaseModel):
    """组装时因读取失败被跳过的文件"""
    path: Path
    reason: str


class CombinedContent(BaseModel):
    """内容合并结果"""
    documents: list[LogicalDocument] = Field(default_factory=list)
    skipped: list[SkippedSource] = Field(default_factory=list)


class ArtifactRef(BaseModel):
    """渲染产物（PDF + 可选配套压缩包）"""
    path: Path
    archive: Path | None = None
