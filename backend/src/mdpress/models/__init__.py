"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- RenderJob/JobResult: 渲染任务与执行结果
- LogicalDocument: 一次渲染的组合内容
- ArtifactRef: PDF 产物及配套压缩包
- CatalogSection/CatalogEntry: 产物目录
"""

from .catalog import CatalogEntry, CatalogSection, RepoInfo
from .document import (
    ArtifactRef,
    AssetKind,
    CombinedContent,
    LogicalDocument,
    SkippedSource,
    is_html_path,
    is_markdown_path,
)
from .job import JobResult, JobStatus, JobType, RenderJob

__all__ = [
    "RenderJob",
    "JobType",
    "JobStatus",
    "JobResult",
    "LogicalDocument",
    "CombinedContent",
    "SkippedSource",
    "ArtifactRef",
    "AssetKind",
    "is_markdown_path",
    "is_html_path",
    "CatalogEntry",
    "CatalogSection",
    "RepoInfo",
]
