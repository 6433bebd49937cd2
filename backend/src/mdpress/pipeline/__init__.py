"""
流水线模块 - 任务编排与产物输出

子模块：
- stages: 流水线各阶段定义
- executor: 渲染任务执行器
- publisher: PDF 输出与配套压缩包
- hydrator: 模板 + 数据批量生成
"""

from .executor import RenderExecutor
from .hydrator import HydrationReport, TemplateHydrator
from .publisher import ArchiveWriter, OutputPublisher
from .stages import StageEnum

__all__ = [
    "StageEnum",
    "RenderExecutor",
    "OutputPublisher",
    "ArchiveWriter",
    "TemplateHydrator",
    "HydrationReport",
]
