"""
图片内嵌器 - 本地图片改写为 base64 data URL

职责：
1. 标签级正则扫描 <img ... src="..."> （不做完整HTML解析，只锚定 src 值）
2. data:/http(s) 引用跳过，本地相对路径按基准目录解析
3. 扩展名推断 MIME，未知时回退 image/png
4. 读取失败记录告警并保留原引用（渲染时显示为坏图，不中断文档）

测试要点：
- test_embed_local_image: 本地图片内嵌
- test_skip_remote_and_data: 远程/已内嵌跳过
- test_idempotent: 重复内嵌结果不变
- test_missing_image_kept: 缺图保留原标签
"""

from __future__ import annotations

import base64
import logging
import mimetypes
import re
from pathlib import Path

from ..interfaces import AssetEmbedError, IAssetEmbedder
from ..models import AssetKind

logger = logging.getLogger(__name__)

# src 前不能是字母数字或连字符，避免命中 data-src
IMG_TAG_RE = re.compile(r"""<img\s+[^>]*?(?<![\w-])src=["']([^"']+)["'][^>]*>""", re.IGNORECASE)
SRC_ATTR_RE = re.compile(r"""(?<![\w-])src=["']([^"']+)["']""", re.IGNORECASE)

FALLBACK_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
}
DEFAULT_MIME_TYPE = "image/png"


def classify_src(src: str) -> AssetKind:
    """图片引用分类"""
    if src.startswith("data:"):
        return AssetKind.INLINE_DATA
    if src.startswith(("http://", "https://")):
        return AssetKind.REMOTE
    return AssetKind.LOCAL


def extract_src(img_tag: str) -> str:
    """取 img 标签的 src 值，没有则返回空串"""
    m = SRC_ATTR_RE.search(img_tag)
    return m.group(1) if m else ""


def replace_src(img_tag: str, new_src: str) -> str:
    """替换 img 标签的 src 值（其余属性不变）"""
    return SRC_ATTR_RE.sub(lambda _: f'src="{new_src}"', img_tag, count=1)


def guess_mime_type(path: Path) -> str:
    """扩展名推断 MIME 类型"""
    ext = path.suffix.lower()
    mime_type, _ = mimetypes.guess_type(path.name)
    if mime_type:
        return mime_type
    return FALLBACK_MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)


def image_to_data_url(src: str, base_dir: Path) -> str:
    """读取图片并编码为 data URL"""
    image_path = base_dir / src
    try:
        data = image_path.read_bytes()
    except OSError as e:
        raise AssetEmbedError(f"图片读取失败: {image_path}: {e}") from e

    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{guess_mime_type(image_path)};base64,{encoded}"


class AssetEmbedder(IAssetEmbedder):
    """图片内嵌器实现"""

    def embed(self, content: str, base_dir: Path) -> str:
        """改写所有本地图片引用"""
        return IMG_TAG_RE.sub(lambda m: self._embed_tag(m.group(0), base_dir), content)

    def _embed_tag(self, img_tag: str, base_dir: Path) -> str:
        src = extract_src(img_tag)
        if not src or classify_src(src) != AssetKind.LOCAL:
            return img_tag

        try:
            data_url = image_to_data_url(src, base_dir)
        except AssetEmbedError as e:
            logger.warning(f"图片内嵌失败，保留原引用 {src}: {e}")
            return img_tag

        return replace_src(img_tag, data_url)
