"""输出目录镜像与写入模块。"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Callable

from spookify.core.config import MirrorMode
from spookify.core.exceptions import InvalidConfigurationError, MirrorError, SpookifyError
from spookify.core.scanner import is_image_path, is_regular_file

LOGGER = logging.getLogger(__name__)

MIRROR_MODES = {"structure", "full"}


class ImageWriteError(SpookifyError):
    """输出写入失败。"""


def mirror_tree(input_root: Path, output_root: Path, mode: MirrorMode = "structure") -> None:
    """在任何合成写入之前，把输入目录树复制到输出目录。

    ``structure`` 模式只复制目录与非图片文件，图片由各自的合成任务写入；
    ``full`` 模式复制全部文件，随后再被合成结果覆盖。符号链接以链接形式复制。
    """

    if mode not in MIRROR_MODES:
        raise InvalidConfigurationError(f"未知的镜像模式: {mode}")

    ignore = _build_ignore(output_root.resolve(), skip_images=mode == "structure")
    LOGGER.debug("镜像目录 %s -> %s (%s)", input_root, output_root, mode)
    try:
        _remove_stale_links(input_root, output_root)
        shutil.copytree(input_root, output_root, ignore=ignore, symlinks=True, dirs_exist_ok=True)
    except (shutil.Error, OSError) as exc:
        raise MirrorError(f"无法复制目录 {input_root} -> {output_root}: {exc}") from exc


def _remove_stale_links(input_root: Path, output_root: Path) -> None:
    """删除输出目录中与输入符号链接同名的旧链接，copytree 无法覆盖已存在的链接。"""

    if not output_root.exists():
        return
    for directory, dirnames, filenames in os.walk(input_root):
        for name in [*dirnames, *filenames]:
            source = Path(directory) / name
            if not source.is_symlink():
                continue
            target = output_root / source.relative_to(input_root)
            if target.is_symlink():
                target.unlink()


def _build_ignore(output_root: Path, *, skip_images: bool) -> Callable[[str, list[str]], set[str]]:
    def ignore(directory: str, names: list[str]) -> set[str]:
        base = Path(directory)
        ignored: set[str] = set()
        for name in names:
            candidate = base / name
            # 输出目录位于输入目录内部时，不能把它复制进自己。
            if candidate.resolve() == output_root:
                ignored.add(name)
            # 只跳过会生成合成任务的普通图片文件，符号链接原样复制。
            elif skip_images and is_image_path(candidate) and is_regular_file(candidate):
                ignored.add(name)
        return ignored

    return ignore


def output_path_for(source: Path, input_root: Path, output_root: Path) -> Path:
    """输出路径 = 输出根目录 + 源文件相对输入根目录的路径。"""

    try:
        relative = source.relative_to(input_root)
    except ValueError:
        relative = source.resolve().relative_to(input_root.resolve())
    return output_root / relative


def write_bytes(data: bytes, destination: Path) -> None:
    """将编码后的图片字节写入磁盘。"""

    try:
        destination.write_bytes(data)
    except OSError as exc:
        raise ImageWriteError(f"写入文件失败: {destination}") from exc
