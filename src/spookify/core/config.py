"""运行配置与装饰素材配置表。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Tuple

from spookify.core.models import NORTHWEST, Corner

DimensionPolicy = str  # both | height | width
MirrorMode = str  # structure | full

DEFAULT_OUTPUT_DIR = Path("dest")
DEFAULT_ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"


@dataclass(slots=True, frozen=True)
class OverlaySpec:
    """单个装饰素材：文件名、缩放除数与摆放方位。

    ``corner`` 为 ``None`` 时，该素材在每张图片上随机分配剩余的角落。
    """

    name: str
    filename: str
    divisor: int
    dimensions: DimensionPolicy = "both"
    corner: Optional[Corner] = None

    @property
    def is_anchor(self) -> bool:
        return self.corner is not None


DEFAULT_OVERLAYS: Tuple[OverlaySpec, ...] = (
    OverlaySpec(name="pumpkin", filename="pumpkin.png", divisor=5, dimensions="both"),
    OverlaySpec(name="spider-web", filename="spider-web.png", divisor=5, dimensions="both", corner=NORTHWEST),
    OverlaySpec(name="skeleton", filename="skeleton.png", divisor=4, dimensions="height"),
    OverlaySpec(name="ghost", filename="ghost.png", divisor=6, dimensions="height"),
)


@dataclass(slots=True)
class RunConfig:
    """单次运行的配置集合。"""

    input_root: Path
    output_root: Path = DEFAULT_OUTPUT_DIR
    overlays: Sequence[OverlaySpec] = field(default_factory=lambda: DEFAULT_OVERLAYS)
    assets_dir: Path = DEFAULT_ASSETS_DIR
    mirror_mode: MirrorMode = "structure"
    random_seed: Optional[int] = None
