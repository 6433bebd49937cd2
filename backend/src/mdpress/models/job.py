"""
任务模型 - 渲染任务定义与执行结果

RenderJob 对应任务配置中的一项（source/output/type），加载后不可变；
JobResult 记录单个任务一次执行的状态、产物和告警。
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .document import ArtifactRef


class JobType(str, Enum):
    """任务类型"""
    SINGLE = "single"           # 全部匹配文件合并为一个PDF
    SUBFOLDERS = "subfolders"   # 每个标记文件独立输出，按父目录命名
    COMBINE = "combine"         # 仅标记文件，按父目录名加一级标题后合并


class JobStatus(str, Enum):
    """任务状态枚举"""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RenderJob(BaseModel):
    """渲染任务（配置文件中的一项）"""
    source: str = Field(..., min_length=1, description="glob模式")
    output: str = Field(..., min_length=1, description="subfolders为目录，其余为PDF路径")
    type: JobType

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def output_path(self) -> Path:
        return Path(self.output)

    def describe(self) -> str:
        return f"{self.type.value} {self.source}"


class JobResult(BaseModel):
    """任务执行结果"""
    job: RenderJob
    status: JobStatus = JobStatus.QUEUED
    stage: str = "INIT"

    artifacts: list[ArtifactRef] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list, description="告警标记")
    errors: list[str] = Field(default_factory=list, description="错误信息")

    started_at: datetime | None = None
    finished_at: datetime | None = None

    def mark_running(self, stage: str = "RESOLVE_SOURCES") -> None:
        """标记为运行中"""
        self.status = JobStatus.RUNNING
        self.started_at = datetime.now()
        self.stage = stage

    def mark_succeeded(self) -> None:
        """标记为成功"""
        self.status = JobStatus.SUCCEEDED
        self.finished_at = datetime.now()

    def mark_failed(self, error: str) -> None:
        """标记为失败"""
        self.status = JobStatus.FAILED
        self.finished_at = datetime.now()
        self.errors.append(error)

    def add_flag(self, flag: str) -> None:
        """添加告警标记（不中断）"""
        if flag not in self.flags:
            self.flags.append(flag)

    @property
    def ok(self) -> bool:
        return self.status == JobStatus.SUCCEEDED
