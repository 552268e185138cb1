"""源图片与装饰素材的加载实现。"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from spookify.core.config import OverlaySpec
from spookify.core.exceptions import AssetMissingError, CompositeError

LOGGER = logging.getLogger(__name__)


def load_image(path: Path) -> tuple[Image.Image, str]:
    """加载单张源图片并执行 EXIF 旋转。

    返回新的 Image 对象与原始容器格式（如 ``PNG``），调用者负责关闭。
    """

    try:
        with Image.open(path) as img:
            img.load()
            image_format = img.format

            # EXIF Orientation 校正
            transposed = ImageOps.exif_transpose(img)
            return transposed.copy(), image_format
    except (UnidentifiedImageError, OSError) as exc:
        LOGGER.debug("无法识别图像文件 %s: %s", path, exc)
        raise CompositeError(f"无法加载图像: {path}") from exc


def load_overlay(assets_dir: Path, spec: OverlaySpec) -> Image.Image:
    """加载装饰素材并统一为 RGBA。素材缺失对每个任务都是致命错误。"""

    asset_path = assets_dir / spec.filename
    if not asset_path.is_file():
        raise AssetMissingError(f"缺少装饰素材 {spec.name}: {asset_path}")

    try:
        with Image.open(asset_path) as asset:
            return asset.convert("RGBA")
    except (UnidentifiedImageError, OSError) as exc:
        raise AssetMissingError(f"无法读取装饰素材 {spec.name}: {asset_path}") from exc
