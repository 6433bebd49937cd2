"""
产物目录模块 - 扫描输出目录并生成可浏览的目录

子模块：
- scanner: 两遍扫描与压缩包配对
- addressing: 远程仓库发现与路径转义
- catalog: HTML / Markdown 目录输出
"""

from .addressing import discover_repository, encode_path, normalize_remote_url
from .catalog import CatalogWriter, build_catalog, catalog_paths
from .scanner import scan_outputs

__all__ = [
    "scan_outputs",
    "discover_repository",
    "normalize_remote_url",
    "encode_path",
    "CatalogWriter",
    "build_catalog",
    "catalog_paths",
]
