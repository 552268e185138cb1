"""装饰素材的尺寸策略与角落分配。"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

from spookify.core.config import OverlaySpec
from spookify.core.exceptions import InvalidConfigurationError
from spookify.core.models import CORNERS, NORTHEAST, NORTHWEST, SOUTHEAST, SOUTHWEST, Corner, Dimensions

VALID_DIMENSION_POLICIES = {"both", "height", "width"}


@dataclass(slots=True, frozen=True)
class Placement:
    """单张图片上某个素材的摆放位置。"""

    spec: OverlaySpec
    corner: Corner


def validate_overlays(specs: Sequence[OverlaySpec]) -> None:
    """检查素材配置表：除数、尺寸策略与固定角落是否合法。"""

    if not specs:
        raise InvalidConfigurationError("至少需要一个装饰素材")

    anchored: set[Corner] = set()
    for spec in specs:
        if spec.divisor <= 0:
            raise InvalidConfigurationError(f"{spec.name} 的缩放除数必须大于 0")
        if spec.dimensions not in VALID_DIMENSION_POLICIES:
            raise InvalidConfigurationError(f"{spec.name} 的尺寸策略未知: {spec.dimensions}")
        if spec.corner is None:
            continue
        if spec.corner not in CORNERS:
            raise InvalidConfigurationError(f"{spec.name} 的角落未知: {spec.corner}")
        if spec.corner in anchored:
            raise InvalidConfigurationError(f"角落 {spec.corner} 被多个素材固定")
        anchored.add(spec.corner)

    floating = sum(1 for spec in specs if not spec.is_anchor)
    if floating > len(CORNERS) - len(anchored):
        raise InvalidConfigurationError("随机摆放的素材数量超过了剩余角落数量")


def scale_box(dimensions: Dimensions, spec: OverlaySpec) -> tuple[int, int]:
    """按除数计算素材的外接框，未参与缩放的一边以原图尺寸为上限。

    每一边至少为 1 像素，避免极小图片得到 0 尺寸。
    """

    width, height = dimensions.width, dimensions.height
    if spec.dimensions in {"both", "width"}:
        width = width // spec.divisor
    if spec.dimensions in {"both", "height"}:
        height = height // spec.divisor
    return max(width, 1), max(height, 1)


def fit_within(size: tuple[int, int], box: tuple[int, int]) -> tuple[int, int]:
    """保持素材宽高比，计算能放进外接框的最大尺寸。"""

    asset_w, asset_h = size
    box_w, box_h = box
    ratio = min(box_w / asset_w, box_h / asset_h)
    width = min(box_w, max(round(asset_w * ratio), 1))
    height = min(box_h, max(round(asset_h * ratio), 1))
    return width, height


def shuffle_corners(rng: random.Random, corners: Sequence[Corner]) -> list[Corner]:
    """返回 ``corners`` 的一个随机排列，不修改输入。"""

    shuffled = list(corners)
    rng.shuffle(shuffled)
    return shuffled


def plan_layout(specs: Sequence[OverlaySpec], rng: random.Random) -> list[Placement]:
    """为单张图片分配角落：固定素材保持原位，其余素材随机占用剩余角落。"""

    validate_overlays(specs)
    anchored = {spec.corner for spec in specs if spec.is_anchor}
    free = shuffle_corners(rng, [corner for corner in CORNERS if corner not in anchored])

    placements: list[Placement] = []
    for spec in specs:
        if spec.is_anchor:
            placements.append(Placement(spec=spec, corner=spec.corner))
        else:
            placements.append(Placement(spec=spec, corner=free.pop(0)))
    return placements


def corner_offset(corner: Corner, base_size: tuple[int, int], overlay_size: tuple[int, int]) -> tuple[int, int]:
    """计算素材左上角坐标，边距为 0。"""

    base_w, base_h = base_size
    overlay_w, overlay_h = overlay_size
    offsets = {
        NORTHWEST: (0, 0),
        NORTHEAST: (base_w - overlay_w, 0),
        SOUTHWEST: (0, base_h - overlay_h),
        SOUTHEAST: (base_w - overlay_w, base_h - overlay_h),
    }
    try:
        return offsets[corner]
    except KeyError as exc:
        raise InvalidConfigurationError(f"未知的角落: {corner}") from exc
