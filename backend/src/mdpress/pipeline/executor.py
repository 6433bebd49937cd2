"""
流水线执行器 - 按配置顺序执行渲染任务

职责：
1. 按顺序执行各任务（单线程，任务间不共享状态）
2. 任务级失败隔离：一个任务失败不影响后续任务
3. 文档级失败隔离：一个文档渲染失败不影响同任务的其他文档
4. 记录阶段、产物和告警

测试要点：
- test_execute_subfolders: 每个目录一个PDF + 配套压缩包
- test_job_failure_isolation: 无匹配任务失败，后续任务继续
- test_document_failure_isolation: 单文档渲染失败
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..interfaces import (
    ArchiveError,
    IAssetEmbedder,
    IContentCombiner,
    IHTMLWrapper,
    IMarkdownConverter,
    IOutputPublisher,
    ISourceResolver,
    MdPressError,
)
from ..models import ArtifactRef, JobResult, JobType, LogicalDocument, RenderJob
from ..render import (
    AssetEmbedder,
    ContentCombiner,
    HTMLWrapper,
    MarkdownConverter,
    SourceResolver,
    needs_wrap,
)
from .publisher import OutputPublisher
from .stages import StageEnum

logger = logging.getLogger(__name__)


class RenderExecutor:
    """流水线执行器"""

    def __init__(
        self,
        resolver: ISourceResolver | None = None,
        combiner: IContentCombiner | None = None,
        converter: IMarkdownConverter | None = None,
        embedder: IAssetEmbedder | None = None,
        wrapper: IHTMLWrapper | None = None,
        publisher: IOutputPublisher | None = None,
    ):
        self.resolver = resolver or SourceResolver()
        self.combiner = combiner or ContentCombiner()
        self.converter = converter or MarkdownConverter()
        self.embedder = embedder or AssetEmbedder()
        self.wrapper = wrapper or HTMLWrapper()
        self.publisher = publisher or OutputPublisher()

    def run(self, jobs: Iterable[RenderJob]) -> list[JobResult]:
        """依次执行全部任务"""
        return [self.execute(job) for job in jobs]

    def execute(self, job: RenderJob) -> JobResult:
        """执行单个任务（异常不外抛）"""
        result = JobResult(job=job)
        result.mark_running(StageEnum.RESOLVE_SOURCES.value)
        logger.info(f"开始任务: {job.describe()}")

        try:
            matches = self.resolver.resolve(job.source)
            result.stage = StageEnum.COMBINE_CONTENT.value
            combined = self.combiner.combine(job, matches)
        except MdPressError as e:
            logger.error(f"任务失败 ({job.describe()}) 阶段 {result.stage}: {e}")
            result.mark_failed(str(e))
            return result

        for skipped in combined.skipped:
            result.add_flag(f"读取失败:{skipped.path}")

        if job.type == JobType.SUBFOLDERS:
            try:
                job.output_path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"任务失败 ({job.describe()})，无法创建输出目录: {e}")
                result.mark_failed(f"无法创建输出目录 {job.output_path}: {e}")
                return result

        for doc in combined.documents:
            try:
                artifact = self.render_document(doc, result=result)
            except MdPressError as e:
                logger.error(f"文档渲染失败 {doc.name} 阶段 {result.stage}: {e}")
                result.add_flag(f"渲染失败:{doc.name}")
                result.errors.append(f"{doc.name}: {e}")
                continue
            result.artifacts.append(artifact)

        if not combined.documents:
            if combined.skipped:
                result.mark_failed("所有标记文件均读取失败")
                return result
            result.add_flag("无标记文件")
        elif not result.artifacts:
            result.mark_failed("所有文档渲染失败")
            return result

        result.mark_succeeded()
        logger.info(f"任务完成: {job.describe()}，产物 {len(result.artifacts)} 个")
        return result

    def render_document(
        self,
        doc: LogicalDocument,
        title: str | None = None,
        result: JobResult | None = None,
    ) -> ArtifactRef:
        """单个逻辑文档：转换 → 内嵌图片 → 包装 → PDF → 配套压缩包"""

        def enter(stage: StageEnum) -> None:
            if result is not None:
                result.stage = stage.value

        content = doc.content
        if doc.is_markdown:
            enter(StageEnum.CONVERT_MARKDOWN)
            content = self.converter.to_html(content)

        enter(StageEnum.EMBED_ASSETS)
        content = self.embedder.embed(content, doc.base_dir)

        if needs_wrap(content, doc.is_markdown):
            enter(StageEnum.WRAP_TEMPLATE)
            content = self.wrapper.wrap(content, title or doc.title)

        enter(StageEnum.RENDER_PDF)
        artifact = self.publisher.publish(content, doc.output_path)

        if doc.companion_folder is not None:
            enter(StageEnum.ZIP_COMPANION)
            try:
                artifact.archive = self.publisher.zip_companion(
                    doc.companion_folder, doc.output_path.parent, doc.name
                )
            except ArchiveError as e:
                logger.error(f"配套压缩包生成失败 {doc.name}: {e}")
                if result is not None:
                    result.add_flag(f"打包失败:{doc.name}")

        return artifact
