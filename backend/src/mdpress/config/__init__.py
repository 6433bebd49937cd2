"""
配置层 - 加载运行期配置与任务配置

职责：
- 加载 mdpress.yaml（运行期参数，支持环境变量覆盖）
- 加载 render.yaml（渲染任务列表）
- 提供类型安全的配置访问接口
"""

from .job_loader import load_jobs, parse_jobs
from .runtime_config import RuntimeConfig, get_config, reload_config

__all__ = [
    "load_jobs",
    "parse_jobs",
    "RuntimeConfig",
    "get_config",
    "reload_config",
]
