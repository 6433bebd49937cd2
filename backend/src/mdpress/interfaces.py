"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换（如用假渲染器替代Chromium）

使用方式：
    from mdpress.interfaces import IPDFRenderer

    class MyRenderer(IPDFRenderer):
        def render(self, html: str, output_path: Path) -> None:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ArtifactRef, CombinedContent, RenderJob


# ============================================================================
# 内容组装模块接口
# ============================================================================

class ISourceResolver(ABC):
    """源文件解析器接口 - glob模式展开为文件列表"""

    @abstractmethod
    def resolve(self, pattern: str) -> list[Path]:
        """
        展开glob模式（支持 ** 递归匹配）

        Args:
            pattern: glob模式，相对于工作目录

        Returns:
            去重后的文件路径列表（非空）

        Raises:
            NoMatchError: 没有任何文件匹配
        """
        ...


class IContentCombiner(ABC):
    """内容合并器接口 - 按任务类型把匹配文件组装为逻辑文档"""

    @abstractmethod
    def combine(self, job: RenderJob, matches: list[Path]) -> CombinedContent:
        """
        按任务类型组装逻辑文档

        Args:
            job: 渲染任务
            matches: 源文件解析结果（按解析顺序）

        Returns:
            逻辑文档列表 + 被跳过的文件

        Raises:
            NoMarkerFilesError: combine 类型下没有标记文件
            ReadError: 所有文件均不可读
        """
        ...


class IMarkdownConverter(ABC):
    """Markdown 渲染器接口"""

    @abstractmethod
    def to_html(self, text: str) -> str:
        """Markdown 转 HTML 片段"""
        ...


class IAssetEmbedder(ABC):
    """图片内嵌器接口"""

    @abstractmethod
    def embed(self, content: str, base_dir: Path) -> str:
        """
        把本地相对图片引用改写为 data URL

        Args:
            content: HTML 片段
            base_dir: 相对路径解析基准目录

        Returns:
            改写后的内容（读取失败的引用保持原样）
        """
        ...


class IHTMLWrapper(ABC):
    """HTML 外壳包装器接口"""

    @abstractmethod
    def wrap(self, content: str, title: str) -> str:
        """把内容和标题填入公共样式外壳"""
        ...


# ============================================================================
# 输出模块接口
# ============================================================================

class IPDFRenderer(ABC):
    """PDF 渲染器接口 - 完整 HTML 文档转 PDF"""

    @abstractmethod
    def render(self, html: str, output_path: Path) -> None:
        """
        渲染 PDF

        Args:
            html: 完整 HTML 文档
            output_path: 输出 PDF 路径

        Raises:
            RenderError: 渲染失败或超时
        """
        ...


class IArchiveWriter(ABC):
    """压缩包写入器接口"""

    @abstractmethod
    def create_from_folder(self, src_dir: Path, dest: Path) -> Path:
        """
        把目录打包为 zip（保留相对路径）

        Raises:
            ArchiveError: 打包失败
        """
        ...


class IOutputPublisher(ABC):
    """产物发布器接口"""

    @abstractmethod
    def publish(self, html: str, output_path: Path) -> ArtifactRef:
        """渲染并写出 PDF"""
        ...

    @abstractmethod
    def zip_companion(self, folder: Path, output_dir: Path, base_name: str) -> Path | None:
        """存在 src 子目录时生成 <base_name>_src.zip"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class MdPressError(Exception):
    """基础异常"""
    pass


class ConfigError(MdPressError):
    """配置错误（致命，任何任务执行前中止）"""
    pass


class NoMatchError(MdPressError):
    """glob 无匹配文件"""

    def __init__(self, pattern: str):
        super().__init__(f"没有文件匹配: {pattern}")
        self.pattern = pattern


class NoMarkerFilesError(MdPressError):
    """combine 任务没有找到标记文件"""

    def __init__(self, pattern: str, marker: str):
        super().__init__(f"没有找到 {marker} 文件: {pattern}")
        self.pattern = pattern
        self.marker = marker


class ReadError(MdPressError):
    """源文件读取错误"""
    pass


class AssetEmbedError(MdPressError):
    """图片读取/内嵌错误"""
    pass


class ConversionError(MdPressError):
    """Markdown/模板转换错误"""
    pass


class RenderError(MdPressError):
    """PDF 渲染错误（含超时）"""
    pass


class ArchiveError(MdPressError):
    """配套压缩包生成错误"""
    pass


class RenderTimeoutError(RenderError):
    """PDF 渲染超时（不重试、不降级）"""
    pass
