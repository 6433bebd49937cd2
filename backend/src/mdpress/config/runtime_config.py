"""
运行期配置 - 读取 mdpress.yaml

职责：
- 加载超时/PDF纸张/标记文件/目录生成等运行参数
- 提供环境变量覆盖机制（前缀 MDPRESS_，嵌套用 __）
- 类型安全的配置访问
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


class TimeoutConfig(BaseModel):
    """超时配置"""

    render_sec: int = 30
    git_sec: int = 5


class PDFConfig(BaseModel):
    """PDF渲染配置（纸张尺寸/边距单位为英寸）"""

    preferred: str = "playwright"
    fallback: str = "chromium"
    chrome_bin: str = Field(default_factory=lambda: os.environ.get("CHROME_BIN", ""))

    paper_width: float = 8.27    # A4
    paper_height: float = 11.69
    margin_top: float = 0.4
    margin_bottom: float = 0.4
    margin_left: float = 0.4
    margin_right: float = 0.4
    print_background: bool = True
    prefer_css_page_size: bool = False
    settle_ms: int = 500


class SourceConfig(BaseModel):
    """源文件约定"""

    marker_filename: str = "README.md"
    archive_dirname: str = "src"
    archive_suffix: str = "_src.zip"


class DashboardConfig(BaseModel):
    """产物目录配置"""

    source: str = "output"
    output: str = "output/files-dashboard.html"
    format: str = "both"
    use_remote: bool = True
    default_branch: str = "main"


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    pdf: PDFConfig = Field(default_factory=PDFConfig)
    sources: SourceConfig = Field(default_factory=SourceConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "MDPRESS_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """环境变量优先于 YAML 值"""
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        # 以字典传入，环境变量按字段合并覆盖
        return cls(
            timeouts=cls._extract(runtime_opts, "timeouts"),
            pdf=cls._extract(runtime_opts, "pdf"),
            sources=cls._extract(runtime_opts, "sources"),
            dashboard=cls._extract(runtime_opts, "dashboard"),
            logging=cls._extract(runtime_opts, "logging"),
        )

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置（支持 {default: x} 写法）"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result


# 全局配置实例
_config: RuntimeConfig | None = None

DEFAULT_CONFIG_PATH = Path("mdpress.yaml")


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        default_path = DEFAULT_CONFIG_PATH
        if not default_path.exists():
            fallback_path = Path("config/mdpress.yaml")
            if fallback_path.exists():
                default_path = fallback_path
        _config = RuntimeConfig.from_yaml(default_path)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
