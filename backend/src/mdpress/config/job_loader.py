"""
任务配置加载 - 读取 render.yaml

职责：
- 解析YAML任务列表（文件路径或内联YAML文本）
- 校验每一项 source/output/type
- 任何错误统一抛出 ConfigError（整次运行中止）

使用方式：
    jobs = load_jobs("render.yaml")
    jobs = load_jobs('- {source: "docs/*.md", output: "out/docs.pdf", type: single}')
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from ..interfaces import ConfigError
from ..models import RenderJob


def load_jobs(config: str | Path) -> list[RenderJob]:
    """加载任务列表（保持配置顺序）"""
    text = _read_config_text(config)

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"任务配置解析失败: {e}") from e

    return parse_jobs(data)


def parse_jobs(data: object) -> list[RenderJob]:
    """校验已解析的任务数据"""
    if data is None:
        return []
    if not isinstance(data, list):
        raise ConfigError(f"任务配置必须是列表，实际为: {type(data).__name__}")

    jobs = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            raise ConfigError(f"第{idx + 1}项任务格式错误: {item!r}")
        try:
            jobs.append(RenderJob(**item))
        except ValidationError as e:
            raise ConfigError(f"第{idx + 1}项任务无效: {e}") from e
    return jobs


def _read_config_text(config: str | Path) -> str:
    """路径存在则读文件，含换行的字符串视为内联YAML"""
    if isinstance(config, str) and "\n" in config:
        return config

    path = Path(config)
    if not path.is_file():
        raise ConfigError(f"任务配置不存在: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"任务配置读取失败: {path}: {e}") from e
