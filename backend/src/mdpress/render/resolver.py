"""
源文件解析器 - glob 模式展开

职责：
1. 以工作目录为根展开 glob（支持 ** 递归）
2. 仅保留普通文件，去重并按字典序排列（* 与 ** 同样匹配以 . 开头的文件和目录）
3. 无匹配时抛出 NoMatchError（任务失败，不静默跳过）

测试要点：
- test_recursive_glob: ** 递归匹配
- test_no_match: 无匹配报错
- test_case_sensitive: 大小写敏感
"""

from __future__ import annotations

import glob
from pathlib import Path

from ..interfaces import ISourceResolver, NoMatchError


class SourceResolver(ISourceResolver):
    """glob 解析器实现"""

    def __init__(self, root: Path | None = None):
        self.root = root or Path(".")

    def resolve(self, pattern: str) -> list[Path]:
        """展开 glob 模式"""
        seen: set[str] = set()
        matches: list[Path] = []

        found = glob.glob(pattern, root_dir=self.root, recursive=True, include_hidden=True)
        for m in sorted(found):
            path = self.root / m
            key = str(Path(m))
            if key in seen or not path.is_file():
                continue
            seen.add(key)
            matches.append(path)

        if not matches:
            raise NoMatchError(pattern)
        return matches
