"""
地址计算 - 远程仓库发现与链接路径转义

职责：
1. 读取 origin 远程地址与当前分支，规范化为 https://github.com/<用户>/<仓库>
2. 任何失败均静默返回 None（回退到相对路径，不中断目录生成）
3. 路径统一为 / 分隔并百分号转义（保留 /）
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from urllib.parse import quote

from ..config import get_config
from ..models import RepoInfo

logger = logging.getLogger(__name__)

GITHUB_SSH_PREFIX = "git@github.com:"
GITHUB_HTTPS_PREFIX = "https://github.com/"


def encode_path(path: str | Path) -> str:
    """链接用路径转义"""
    return quote(str(path).replace(os.sep, "/"), safe="/")


def relative_link(target: Path, start_dir: Path) -> str:
    """从 start_dir 指向 target 的相对链接"""
    return encode_path(os.path.relpath(target, start_dir))


def normalize_remote_url(url: str) -> str | None:
    """GitHub 远程地址转浏览地址，非 GitHub 返回 None"""
    url = url.strip()
    if url.startswith(GITHUB_SSH_PREFIX):
        repo = url[len(GITHUB_SSH_PREFIX):]
    elif url.startswith(GITHUB_HTTPS_PREFIX):
        repo = url[len(GITHUB_HTTPS_PREFIX):]
    else:
        return None

    repo = repo.removesuffix(".git").strip("/")
    if not repo:
        return None
    return GITHUB_HTTPS_PREFIX + repo


def discover_repository(cwd: Path | None = None) -> RepoInfo | None:
    """发现远程仓库与当前分支（尽力而为）"""
    config = get_config()
    timeout = config.timeouts.git_sec

    remote = _git(["config", "--get", "remote.origin.url"], cwd, timeout)
    if not remote:
        return None
    url = normalize_remote_url(remote)
    if url is None:
        logger.debug(f"非 GitHub 远程地址，使用相对路径: {remote}")
        return None

    branch = _git(["rev-parse", "--abbrev-ref", "HEAD"], cwd, timeout)
    return RepoInfo(url=url, branch=branch or config.dashboard.default_branch)


def _git(args: list[str], cwd: Path | None, timeout: int) -> str | None:
    try:
        completed = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
            cwd=str(cwd) if cwd else None,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"git {' '.join(args)} 失败: {e}")
        return None
    return completed.stdout.strip() or None
