"""
产物发布器 - 写出PDF并生成配套源码压缩包

职责：
1. 确保输出目录存在后调用PDF渲染器
2. subfolders 任务：标记文件旁存在 src 目录时打包为 <名称>_src.zip
3. 压缩包失败不影响已写出的PDF

测试要点：
- test_publish_creates_parents: 自动创建目录
- test_zip_companion: src 目录打包（保留相对路径）
- test_zip_companion_absent: 无 src 目录不生成
- test_zip_companion_overwrite: 覆盖旧压缩包
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from ..config import get_config
from ..fsutil import atomic_target
from ..interfaces import (
    ArchiveError,
    IArchiveWriter,
    IOutputPublisher,
    IPDFRenderer,
    RenderError,
)
from ..models import ArtifactRef
from ..render.pdf_engine import PDFRenderer

logger = logging.getLogger(__name__)


class ArchiveWriter(IArchiveWriter):
    """zip 打包实现"""

    def create_from_folder(self, src_dir: Path, dest: Path) -> Path:
        """打包目录（条目名为相对 src_dir 的路径）"""
        try:
            with atomic_target(dest) as tmp:
                with zipfile.ZipFile(tmp, "w", zipfile.ZIP_DEFLATED) as zf:
                    for file in sorted(src_dir.rglob("*")):
                        if file.is_file():
                            zf.write(file, file.relative_to(src_dir).as_posix())
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveError(f"打包失败 {src_dir} -> {dest}: {e}") from e
        return dest


class OutputPublisher(IOutputPublisher):
    """产物发布器实现"""

    def __init__(
        self,
        renderer: IPDFRenderer | None = None,
        archive_writer: IArchiveWriter | None = None,
        archive_dirname: str | None = None,
        archive_suffix: str | None = None,
    ):
        sources = get_config().sources
        self.renderer = renderer or PDFRenderer()
        self.archive_writer = archive_writer or ArchiveWriter()
        self.archive_dirname = archive_dirname or sources.archive_dirname
        self.archive_suffix = archive_suffix or sources.archive_suffix

    def publish(self, html: str, output_path: Path) -> ArtifactRef:
        """渲染PDF（RenderError 向上抛出）"""
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RenderError(f"无法创建输出目录 {output_path.parent}: {e}") from e
        self.renderer.render(html, output_path)
        return ArtifactRef(path=output_path)

    def zip_companion(self, folder: Path, output_dir: Path, base_name: str) -> Path | None:
        """folder/src 存在时打包到 output_dir/<base_name>_src.zip"""
        src_dir = folder / self.archive_dirname
        if not src_dir.is_dir():
            return None

        zip_path = output_dir / f"{base_name}{self.archive_suffix}"
        self.archive_writer.create_from_folder(src_dir, zip_path)
        logger.info(f"已打包: {zip_path}")
        return zip_path
