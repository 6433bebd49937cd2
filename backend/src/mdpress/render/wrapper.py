"""
外壳包装 - 判断是否需要公共样式外壳并渲染

职责：
1. Markdown 来源始终包装（自身没有文档结构）
2. HTML 来源含 doctype/html/head/style 任一标记即视为完整文档，直接使用
3. 渲染 templates/page.html（排版/代码块/表格/高亮样式）

依赖：
- Jinja2: 外壳模板（标题转义，正文原样插入）
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape

from ..interfaces import IHTMLWrapper

DOCUMENT_MARKERS = ("<!doctype", "<html", "<head", "<style")

PAGE_TEMPLATE = "page.html"


def is_complete_html_document(content: str) -> bool:
    """内容是否已是自带样式的完整HTML文档"""
    lower = content.lower()
    return any(marker in lower for marker in DOCUMENT_MARKERS)


def needs_wrap(content: str, is_markdown: bool) -> bool:
    """是否需要套公共外壳"""
    if is_markdown:
        return True
    return not is_complete_html_document(content)


def resolve_title(default: str, data: Any = None) -> str:
    """数据中的 Title 字段优先，否则用默认名"""
    if isinstance(data, Mapping):
        title = data.get("Title")
        if isinstance(title, str):
            return title
    return default


def create_environment() -> Environment:
    """包内模板环境（html 模板自动转义）"""
    return Environment(
        loader=PackageLoader("mdpress", "templates"),
        autoescape=select_autoescape(["html"]),
        keep_trailing_newline=True,
    )


class HTMLWrapper(IHTMLWrapper):
    """公共外壳包装器"""

    def __init__(self, env: Environment | None = None, template_name: str = PAGE_TEMPLATE):
        self.env = env or create_environment()
        self.template = self.env.get_template(template_name)

    def wrap(self, content: str, title: str) -> str:
        return self.template.render(title=title, content=content)
