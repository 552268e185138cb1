"""装饰素材合成模块。"""

from __future__ import annotations

import io
import logging
import random
from pathlib import Path
from typing import Mapping, Sequence

from PIL import Image

from spookify.core.config import RunConfig
from spookify.core.exceptions import CompositeError
from spookify.core.models import Dimensions
from spookify.core.output_manager import write_bytes
from spookify.processing.image_loader import load_image, load_overlay
from spookify.processing.layout import Placement, corner_offset, fit_within, plan_layout, scale_box

LOGGER = logging.getLogger(__name__)

_RESAMPLING = getattr(Image, "Resampling", Image)

ALPHA_FORMATS = {"PNG", "WEBP", "TIFF"}
ALPHA_MODES = {"RGBA", "LA", "PA"}

SAVE_PARAMS: dict[str, dict[str, object]] = {
    "JPEG": {"quality": 95, "subsampling": 1, "optimize": True},
    "PNG": {"optimize": True},
}


def spookify_image(source_path: Path, destination: Path, config: RunConfig, rng: random.Random) -> list[Placement]:
    """读取源图片，合成全部装饰素材，并以源格式写入 ``destination``。

    合成阶段的错误总是在写入之前抛出，因此同一任务中它优先于写入错误。
    返回本次使用的摆放方案，便于日志与测试检查。
    """

    image, image_format = load_image(source_path)
    try:
        overlays = {spec.name: load_overlay(config.assets_dir, spec) for spec in config.overlays}
        placements = plan_layout(config.overlays, rng)
        composited = composite_overlays(image, placements, overlays)
        has_alpha = image.mode in ALPHA_MODES or "transparency" in image.info
        data = encode_image(composited, image_format, has_alpha=has_alpha)
    finally:
        image.close()

    write_bytes(data, destination)
    LOGGER.debug(
        "%s -> %s: %s",
        source_path,
        destination,
        ", ".join(f"{p.spec.name}@{p.corner}" for p in placements),
    )
    return placements


def composite_overlays(
    image: Image.Image,
    placements: Sequence[Placement],
    overlays: Mapping[str, Image.Image],
) -> Image.Image:
    """把缩放后的素材按角落叠加到原尺寸图片上，返回 RGBA 结果。"""

    base = image.convert("RGBA")
    dimensions = Dimensions.from_size(base.size)

    for placement in placements:
        asset = overlays[placement.spec.name]
        size = fit_within(asset.size, scale_box(dimensions, placement.spec))
        try:
            resized = asset.resize(size, _RESAMPLING.LANCZOS)
            base.alpha_composite(resized, dest=corner_offset(placement.corner, base.size, resized.size))
        except (ValueError, OSError) as exc:
            raise CompositeError(f"合成素材 {placement.spec.name} 失败: {exc}") from exc

    return base


def encode_image(image: Image.Image, image_format: str, *, has_alpha: bool) -> bytes:
    """按源图片的容器格式编码；只有格式与源图都带透明通道时才保留 Alpha。"""

    keep_alpha = has_alpha and image_format in ALPHA_FORMATS
    image_to_save = image if keep_alpha else image.convert("RGB")

    buffer = io.BytesIO()
    try:
        image_to_save.save(buffer, format=image_format, **SAVE_PARAMS.get(image_format, {}))
    except (ValueError, OSError, KeyError) as exc:
        raise CompositeError(f"无法编码为 {image_format}: {exc}") from exc
    return buffer.getvalue()
