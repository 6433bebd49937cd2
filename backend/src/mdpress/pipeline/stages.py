"""
流水线阶段定义

单个任务依次经过：解析源文件 → 合并内容 → 逐文档渲染（Markdown转换/
图片内嵌/外壳包装/PDF输出/配套压缩包）。阶段名写入 JobResult.stage，
失败时用于定位。
"""

from __future__ import annotations

from enum import Enum


class StageEnum(str, Enum):
    """流水线阶段枚举"""
    RESOLVE_SOURCES = "RESOLVE_SOURCES"
    COMBINE_CONTENT = "COMBINE_CONTENT"
    CONVERT_MARKDOWN = "CONVERT_MARKDOWN"
    EMBED_ASSETS = "EMBED_ASSETS"
    WRAP_TEMPLATE = "WRAP_TEMPLATE"
    RENDER_PDF = "RENDER_PDF"
    ZIP_COMPANION = "ZIP_COMPANION"
