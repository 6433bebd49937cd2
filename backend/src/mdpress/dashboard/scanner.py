"""
产物扫描 - 两遍遍历输出目录，生成按目录分组的产物清单

职责：
1. 第一遍：<名称>_src.zip 且同目录存在 <名称>.pdf 时记录配对
2. 第二遍：列出除已配对压缩包外的所有文件，按所在目录分组
3. PDF 条目附上配对的压缩包；目录名、文件名按字典序排列（输出确定）

测试要点：
- test_pairing: demo.pdf + demo_src.zip 合并为一条
- test_orphan_archive_listed: 无对应 PDF 的压缩包作为普通条目
- test_plain_zip_listed: 非 _src.zip 的压缩包作为普通条目
- test_sorted: 分组与文件排序
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from ..config import get_config
from ..models import CatalogEntry, CatalogSection

PRIMARY_SUFFIX = ".pdf"


def scan_outputs(
    source: Path,
    exclude: Iterable[Path] = (),
    archive_suffix: str | None = None,
) -> list[CatalogSection]:
    """扫描 source，返回排序后的分组列表（exclude 中的文件不列出）"""
    suffix = archive_suffix or get_config().sources.archive_suffix
    excluded = {_key(p) for p in exclude}

    files = [p for p in _walk_files(source) if _key(p) not in excluded]
    pdf_to_zip = _pair_archives(files, source, suffix)
    paired_archives = set(pdf_to_zip.values())

    sections: dict[str, list[CatalogEntry]] = {}
    for path in files:
        rel = path.relative_to(source).as_posix()
        if rel in paired_archives:
            continue

        archive = None
        if path.suffix.lower() == PRIMARY_SUFFIX:
            archive = pdf_to_zip.get(rel)

        folder = path.parent.as_posix()
        sections.setdefault(folder, []).append(
            CatalogEntry(name=path.name, path=rel, archive=archive)
        )

    return [
        CatalogSection(folder=folder, files=sorted(entries, key=lambda e: e.name))
        for folder, entries in sorted(sections.items())
    ]


def _pair_archives(files: list[Path], source: Path, suffix: str) -> dict[str, str]:
    """PDF相对路径 -> 配套压缩包相对路径"""
    existing = {_key(p) for p in files}
    pairs: dict[str, str] = {}
    for path in files:
        name = path.name
        if len(name) <= len(suffix) or not name.endswith(suffix):
            continue
        pdf_path = path.with_name(name[: -len(suffix)] + PRIMARY_SUFFIX)
        if _key(pdf_path) in existing:
            pairs[pdf_path.relative_to(source).as_posix()] = path.relative_to(source).as_posix()
    return pairs


def _walk_files(source: Path) -> list[Path]:
    result = []
    for dirpath, _dirnames, filenames in os.walk(source):
        for filename in filenames:
            result.append(Path(dirpath) / filename)
    return result


def _key(path: Path) -> str:
    return os.path.normcase(os.path.abspath(path))
