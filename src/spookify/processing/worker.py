"""单个合成任务的执行单元。"""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path

from spookify.core.config import RunConfig
from spookify.core.models import FileOutcome
from spookify.processing.compositor import spookify_image


@dataclass(slots=True)
class Job:
    """描述单个图片合成任务。"""

    source_path: Path
    output_path: Path
    random_seed: int


def run_job(job: Job, config: RunConfig) -> FileOutcome:
    """执行合成任务；失败时异常直接向上传播，由批处理终止后续任务。"""

    rng = random.Random(job.random_seed)
    placements = spookify_image(job.source_path, job.output_path, config, rng)
    return FileOutcome(
        source_path=job.source_path,
        status="processed",
        output_path=job.output_path,
        message=", ".join(f"{p.spec.name}@{p.corner}" for p in placements),
    )
