"""
Markdown 渲染 - Python-Markdown 封装

职责：
1. GitHub 风格扩展（表格/围栏代码/脚注/标题锚点）
2. Pygments 代码高亮（CSS 类前缀 highlight，样式由外壳提供）
3. 原始 HTML 原样保留（模板中的 <img> 等标签需要直通）

依赖：
- Markdown: 语法解析
- Pygments: codehilite 高亮
"""

from __future__ import annotations

import markdown

from ..interfaces import ConversionError, IMarkdownConverter

DEFAULT_EXTENSIONS = ["extra", "sane_lists", "toc", "codehilite"]

DEFAULT_EXTENSION_CONFIGS = {
    "codehilite": {
        "css_class": "highlight",
        "guess_lang": False,
    },
}


class MarkdownConverter(IMarkdownConverter):
    """Markdown 转 HTML"""

    def __init__(
        self,
        extensions: list[str] | None = None,
        extension_configs: dict | None = None,
    ):
        self._md = markdown.Markdown(
            extensions=extensions if extensions is not None else DEFAULT_EXTENSIONS,
            extension_configs=(
                extension_configs
                if extension_configs is not None
                else DEFAULT_EXTENSION_CONFIGS
            ),
            output_format="html",
        )

    def to_html(self, text: str) -> str:
        """Markdown 转 HTML 片段"""
        try:
            return self._md.reset().convert(text)
        except Exception as e:
            raise ConversionError(f"Markdown转换失败: {e}") from e
