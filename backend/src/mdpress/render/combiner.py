"""
内容合并器 - 按任务类型组装逻辑文档

职责：
1. subfolders: 每个标记文件单独成文档，以父目录名命名（避免同名冲突）
2. single: 所有匹配文件以空行拼接为一个文档
3. combine: 仅标记文件，以父目录名作一级标题，分隔线拼接
4. 单个文件读取失败记录告警并跳过
5. 仅当全部来源都是 HTML 时按 HTML 处理，否则整体按 Markdown 转换

测试要点：
- test_subfolders_named_by_folder: 产物名取父目录名
- test_single_merge: 空行拼接、基准目录取首个匹配
- test_combine_headers: 标题+分隔线
- test_combine_no_marker: 无标记文件报错
- test_read_failure_skipped: 读取失败跳过
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import get_config
from ..interfaces import IContentCombiner, NoMarkerFilesError, ReadError
from ..models import (
    CombinedContent,
    JobType,
    LogicalDocument,
    RenderJob,
    SkippedSource,
    is_html_path,
)

logger = logging.getLogger(__name__)

MERGE_DELIMITER = "\n\n"
SECTION_SEPARATOR = "\n\n---\n\n"


class ContentCombiner(IContentCombiner):
    """内容合并器实现"""

    def __init__(self, marker_filename: str | None = None):
        self.marker = marker_filename or get_config().sources.marker_filename

    def combine(self, job: RenderJob, matches: list[Path]) -> CombinedContent:
        """按任务类型组装"""
        if job.type == JobType.SUBFOLDERS:
            return self.combine_independent(job, matches)
        if job.type == JobType.SINGLE:
            return self.combine_merge(job, matches)
        return self.combine_with_headers(job, matches)

    def combine_independent(self, job: RenderJob, matches: list[Path]) -> CombinedContent:
        """每个标记文件一个文档"""
        result = CombinedContent()
        output_dir = job.output_path

        for path in self._markers(matches):
            folder = path.parent
            name = _folder_name(folder)
            try:
                content = self._read(path)
            except ReadError as e:
                logger.warning(f"读取失败，跳过文档 {name}: {e}")
                result.skipped.append(SkippedSource(path=path, reason=str(e)))
                continue

            result.documents.append(
                LogicalDocument(
                    name=name,
                    content=content,
                    base_dir=folder,
                    output_path=output_dir / f"{name}.pdf",
                    sources=[path],
                    is_markdown=not is_html_path(path),
                    companion_folder=folder,
                )
            )
        return result

    def combine_merge(self, job: RenderJob, matches: list[Path]) -> CombinedContent:
        """全部匹配文件拼接"""
        result = CombinedContent()
        parts, sources = self._read_all(matches, result)

        if not parts:
            raise ReadError(f"所有匹配文件均读取失败: {job.source}")

        result.documents.append(
            LogicalDocument(
                name=job.output_path.stem,
                content=MERGE_DELIMITER.join(parts),
                base_dir=matches[0].parent,
                output_path=job.output_path,
                sources=sources,
                is_markdown=not all(is_html_path(p) for p in sources),
            )
        )
        return result

    def combine_with_headers(self, job: RenderJob, matches: list[Path]) -> CombinedContent:
        """标记文件加目录名标题后拼接"""
        markers = self._markers(matches)
        if not markers:
            raise NoMarkerFilesError(job.source, self.marker)

        result = CombinedContent()
        parts, sources = self._read_all(markers, result)

        if not parts:
            raise ReadError(f"所有 {self.marker} 均读取失败: {job.source}")

        sections = [
            f"# {_folder_name(path.parent)}\n\n{content}"
            for path, content in zip(sources, parts)
        ]

        result.documents.append(
            LogicalDocument(
                name=job.output_path.stem,
                content=SECTION_SEPARATOR.join(sections),
                base_dir=markers[0].parent,
                output_path=job.output_path,
                sources=sources,
                is_markdown=not is_html_path(self.marker),
            )
        )
        return result

    def _markers(self, matches: list[Path]) -> list[Path]:
        return [p for p in matches if p.name == self.marker]

    def _read_all(
        self, paths: list[Path], result: CombinedContent
    ) -> tuple[list[str], list[Path]]:
        """逐个读取，失败的记录到 skipped"""
        parts: list[str] = []
        sources: list[Path] = []
        for path in paths:
            try:
                parts.append(self._read(path))
            except ReadError as e:
                logger.warning(f"读取失败，跳过: {e}")
                result.skipped.append(SkippedSource(path=path, reason=str(e)))
                continue
            sources.append(path)
        return parts, sources

    @staticmethod
    def _read(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(f"{path}: {e}") from e


def _folder_name(folder: Path) -> str:
    """父目录名（工作目录根下的文件取绝对路径的目录名）"""
    return folder.name or folder.resolve().name
