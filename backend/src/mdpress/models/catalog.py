"""
产物目录模型 - 目录条目、分组与仓库地址信息
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CatalogEntry(BaseModel):
    """目录条目（路径均相对扫描根目录，使用 / 分隔）"""
    name: str
    path: str
    archive: str | None = None


class CatalogSection(BaseModel):
    """按所在目录分组"""
    folder: str
    files: list[CatalogEntry] = Field(default_factory=list)


class RepoInfo(BaseModel):
    """远程仓库浏览地址"""
    url: str
    branch: str

    def browse_url(self, path: str) -> str:
        """仓库内路径在远程浏览页的地址（path 需已转义）"""
        return f"{self.url}/blob/{self.branch}/{path}"
