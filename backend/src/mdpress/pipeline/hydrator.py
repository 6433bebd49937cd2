"""
模板填充 - 一个模板 + 一份JSON数据批量生成PDF

职责：
1. 模板（.html 或 .md）按 Jinja2 渲染，数据文件为 {文档名: 数据} 映射
2. 每个条目：渲染模板 → Markdown转换 → 图片内嵌 → 外壳判断 → PDF
3. 标题取数据中的 Title 字段，否则用条目名
4. 单个条目失败记录日志，其余条目继续

测试要点：
- test_hydrate_html_wrapped: 简单HTML模板套外壳
- test_hydrate_styled_not_wrapped: 自带样式模板直接使用
- test_hydrate_markdown: Markdown 模板
- test_bad_data_file: 数据文件错误
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, Template, TemplateError

from ..interfaces import ConfigError, ConversionError, MdPressError
from ..models import ArtifactRef, LogicalDocument, is_markdown_path
from ..render import resolve_title
from .executor import RenderExecutor

logger = logging.getLogger(__name__)


class HydrationReport:
    """批量生成结果"""

    def __init__(self) -> None:
        self.artifacts: list[ArtifactRef] = []
        self.failures: dict[str, str] = {}

    @property
    def ok(self) -> bool:
        return not self.failures


class TemplateHydrator:
    """模板填充器"""

    def __init__(self, executor: RenderExecutor | None = None):
        self.executor = executor or RenderExecutor()

    def hydrate(
        self,
        template_path: Path,
        data_path: Path,
        output_dir: Path,
        images_dir: Path | None = None,
    ) -> HydrationReport:
        """按数据条目逐个生成 <output_dir>/<名称>.pdf"""
        is_markdown = is_markdown_path(template_path)
        template = self._load_template(template_path, autoescape=not is_markdown)
        entries = self._load_data(data_path)
        base_dir = images_dir or template_path.parent

        output_dir.mkdir(parents=True, exist_ok=True)
        report = HydrationReport()

        for name in sorted(entries):
            data = entries[name]
            try:
                content = self._render_entry(template, data)
                doc = LogicalDocument(
                    name=name,
                    content=content,
                    base_dir=base_dir,
                    output_path=output_dir / f"{name}.pdf",
                    sources=[template_path],
                    is_markdown=is_markdown,
                )
                artifact = self.executor.render_document(doc, title=resolve_title(name, data))
            except MdPressError as e:
                logger.error(f"生成失败 {name}: {e}")
                report.failures[name] = str(e)
                continue

            logger.info(f"已生成: {artifact.path}")
            report.artifacts.append(artifact)

        return report

    @staticmethod
    def _load_template(template_path: Path, autoescape: bool) -> Template:
        """HTML 模板中的数据值按 HTML 转义"""
        try:
            source = template_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"模板读取失败: {template_path}: {e}") from e
        try:
            env = Environment(autoescape=autoescape, keep_trailing_newline=True)
            return env.from_string(source)
        except TemplateError as e:
            raise ConfigError(f"模板解析失败: {template_path}: {e}") from e

    @staticmethod
    def _load_data(data_path: Path) -> dict[str, Any]:
        try:
            with open(data_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"数据文件读取失败: {data_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"数据文件解析失败: {data_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"数据文件必须是对象（名称 -> 数据）: {data_path}")
        return data

    @staticmethod
    def _render_entry(template: Template, data: Any) -> str:
        """映射的键直接作为模板变量，完整数据另以 data 提供"""
        context: dict[str, Any] = {"data": data}
        if isinstance(data, Mapping):
            context.update(data)
        try:
            return template.render(context)
        except TemplateError as e:
            raise ConversionError(f"模板渲染失败: {e}") from e
        except (TypeError, ValueError, ArithmeticError, LookupError) as e:
            raise ConversionError(f"模板表达式求值失败: {type(e).__name__}: {e}") from e
