"""
内容组装模块 - 源文件解析/合并/Markdown转换/图片内嵌/外壳包装/PDF渲染

子模块：
- resolver: glob 展开
- combiner: 三种任务类型的内容合并
- markdown_engine: Markdown 转 HTML
- assets: 本地图片内嵌为 data URL
- wrapper: 外壳判断与包装
- pdf_engine: HTML 导出 PDF
"""

from .assets import AssetEmbedder
from .combiner import ContentCombiner
from .markdown_engine import MarkdownConverter
from .pdf_engine import PDFRenderer
from .resolver import SourceResolver
from .wrapper import HTMLWrapper, is_complete_html_document, needs_wrap, resolve_title

__all__ = [
    "SourceResolver",
    "ContentCombiner",
    "MarkdownConverter",
    "AssetEmbedder",
    "HTMLWrapper",
    "needs_wrap",
    "is_complete_html_document",
    "resolve_title",
    "PDFRenderer",
]
