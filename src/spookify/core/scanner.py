"""文件遍历与图片识别逻辑。"""

from __future__ import annotations

import stat
from pathlib import Path
from typing import Iterable, Iterator

from spookify.core.exceptions import EnumerationError

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tif", ".tiff"}


def is_regular_file(path: Path) -> bool:
    # lstat：符号链接（包括指向文件的链接）一律排除。
    try:
        return stat.S_ISREG(path.lstat().st_mode)
    except OSError:
        return False


def _is_excluded(candidate: Path, excluded: list[Path]) -> bool:
    return any(candidate == root or root in candidate.parents for root in excluded)


def _iter_regular_files(root: Path, excluded: list[Path]) -> Iterator[Path]:
    """递归遍历目录下的所有普通文件，不进入符号链接目录。"""

    for candidate in root.rglob("*"):
        if excluded and _is_excluded(candidate.resolve(), excluded):
            continue
        if is_regular_file(candidate):
            yield candidate


def enumerate_files(root: Path, exclude: Iterable[Path] = ()) -> list[Path]:
    """返回 ``root`` 下任意深度的所有普通文件，按路径排序。

    ``exclude`` 中的目录（例如嵌套在输入目录内的输出目录）会被跳过。
    """

    if not root.exists():
        raise EnumerationError(f"输入路径不存在: {root}")
    if not root.is_dir():
        raise EnumerationError(f"输入路径不是目录: {root}")

    excluded = [path.resolve() for path in exclude]
    try:
        files = list(_iter_regular_files(root, excluded))
    except OSError as exc:
        raise EnumerationError(f"无法遍历输入目录: {root}") from exc

    files.sort(key=lambda path: str(path))
    return files


def is_image_path(path: Path) -> bool:
    """根据扩展名判断文件是否需要合成装饰。"""

    return path.suffix.lower() in IMAGE_EXTENSIONS
