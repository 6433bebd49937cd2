"""
数据模型单元测试
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from mdpress.models import (
    ArtifactRef,
    JobResult,
    JobStatus,
    JobType,
    LogicalDocument,
    RenderJob,
    RepoInfo,
    is_markdown_path,
)


class TestRenderJob:
    """渲染任务测试"""

    def test_create_job(self):
        """测试创建任务"""
        job = RenderJob(source="docs/*.md", output="out/docs.pdf", type="single")
        assert job.type == JobType.SINGLE
        assert job.output_path == Path("out/docs.pdf")
        assert job.describe() == "single docs/*.md"

    def test_job_frozen(self):
        """测试任务加载后不可变"""
        job = RenderJob(source="a", output="b", type=JobType.COMBINE)
        with pytest.raises(ValidationError):
            job.source = "other"

    def test_empty_source_rejected(self):
        """测试空 source"""
        with pytest.raises(ValidationError):
            RenderJob(source="", output="b", type=JobType.SINGLE)


class TestJobResult:
    """任务结果测试"""

    def test_lifecycle(self):
        """测试状态流转"""
        job = RenderJob(source="a", output="b.pdf", type=JobType.SINGLE)
        result = JobResult(job=job)
        assert result.status == JobStatus.QUEUED

        result.mark_running()
        assert result.status == JobStatus.RUNNING
        assert result.started_at is not None

        result.artifacts.append(ArtifactRef(path=Path("b.pdf")))
        result.mark_succeeded()
        assert result.ok
        assert result.finished_at is not None

    def test_mark_failed(self):
        """测试失败记录错误"""
        result = JobResult(job=RenderJob(source="a", output="b", type=JobType.SINGLE))
        result.mark_failed("没有文件匹配: a")
        assert not result.ok
        assert result.errors == ["没有文件匹配: a"]

    def test_flags_deduplicated(self):
        """测试告警去重"""
        result = JobResult(job=RenderJob(source="a", output="b", type=JobType.SINGLE))
        result.add_flag("读取失败:x")
        result.add_flag("读取失败:x")
        assert result.flags == ["读取失败:x"]


class TestDocumentModels:
    """文档模型测试"""

    def test_is_markdown_path(self):
        """测试 Markdown 扩展名判断"""
        assert is_markdown_path("README.md")
        assert is_markdown_path(Path("notes.MARKDOWN"))
        assert not is_markdown_path("page.html")

    def test_document_title(self):
        """测试文档标题取名称"""
        doc = LogicalDocument(
            name="alpha",
            content="# A",
            base_dir=Path("."),
            output_path=Path("out/alpha.pdf"),
        )
        assert doc.title == "alpha"
        assert doc.companion_folder is None

    def test_repo_browse_url(self):
        """测试仓库浏览地址"""
        repo = RepoInfo(url="https://github.com/acme/docs", branch="dev")
        assert repo.browse_url("output/a%20b.pdf") == (
            "https://github.com/acme/docs/blob/dev/output/a%20b.pdf"
        )
