"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

Corner = str  # northwest | northeast | southwest | southeast

NORTHWEST: Corner = "northwest"
NORTHEAST: Corner = "northeast"
SOUTHWEST: Corner = "southwest"
SOUTHEAST: Corner = "southeast"

CORNERS: tuple[Corner, ...] = (NORTHWEST, NORTHEAST, SOUTHWEST, SOUTHEAST)


@dataclass(slots=True, frozen=True)
class Dimensions:
    """源图片的像素尺寸。"""

    width: int
    height: int

    @classmethod
    def from_size(cls, size: tuple[int, int]) -> "Dimensions":
        return cls(width=size[0], height=size[1])


@dataclass(slots=True)
class FileOutcome:
    """记录单个文件的处理结果。"""

    source_path: Path
    status: str
    output_path: Optional[Path] = None
    message: Optional[str] = None


@dataclass(slots=True)
class BatchResult:
    """一次运行的整体结果：全部成功，或在第一个失败处终止。"""

    succeeded: list[FileOutcome] = field(default_factory=list)
    failed: Optional[FileOutcome] = None
    error: Optional[Exception] = None
    total: int = 0
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None
