"""处理流水线：遍历、镜像输出目录，并逐个顺序执行合成任务。"""

from __future__ import annotations

import logging
import random
import time
from pathlib import Path
from typing import Callable, Optional

from spookify.core.config import RunConfig
from spookify.core.exceptions import InvalidConfigurationError, SpookifyError
from spookify.core.models import BatchResult, FileOutcome
from spookify.core.output_manager import mirror_tree, output_path_for
from spookify.core.progress import ProgressUpdate
from spookify.core.scanner import enumerate_files, is_image_path
from spookify.processing.layout import validate_overlays
from spookify.processing.worker import Job, run_job

LOGGER = logging.getLogger(__name__)


ProgressCallback = Optional[Callable[[ProgressUpdate], None]]


def process_batch(
    config: RunConfig,
    progress_callback: ProgressCallback = None,
) -> BatchResult:
    """批处理入口：遍历输入、镜像输出目录，然后严格按顺序逐个合成。

    第一个失败的任务会终止整个批次，其后的任务不会执行；此前完成的
    任务结果已经落盘。
    """

    started = time.perf_counter()
    result = BatchResult()

    try:
        validate_overlays(config.overlays)
        jobs = build_jobs(config)
        result.total = len(jobs)
        if progress_callback:
            progress_callback(ProgressUpdate(total=result.total, completed=0, status="mirroring"))
        mirror_tree(config.input_root, config.output_root, config.mirror_mode)
    except SpookifyError as exc:
        LOGGER.error("准备阶段失败：%s", exc)
        result.error = exc
        result.elapsed = time.perf_counter() - started
        return result

    LOGGER.info("共 %d 个图片任务", result.total)
    for index, job in enumerate(jobs):
        _emit_progress(progress_callback, index, result.total, job, status="processing")
        try:
            outcome = run_job(job, config)
        except SpookifyError as exc:
            LOGGER.error("任务失败 %s：%s", job.source_path, exc)
            result.failed = FileOutcome(
                source_path=job.source_path,
                status="error",
                output_path=job.output_path,
                message=str(exc),
            )
            result.error = exc
            break
        result.succeeded.append(outcome)
        _emit_progress(progress_callback, index + 1, result.total, job, status="done")

    result.elapsed = time.perf_counter() - started
    return result


def build_jobs(config: RunConfig) -> list[Job]:
    """为输入目录中的每个图片文件生成一个任务，任务种子来自本次运行的随机源。"""

    files = enumerate_files(config.input_root, exclude=_nested_output(config))
    LOGGER.info("发现 %d 个文件", len(files))

    global_rng = random.Random(config.random_seed)
    jobs: list[Job] = []
    for path in files:
        if not is_image_path(path):
            continue
        jobs.append(
            Job(
                source_path=path,
                output_path=output_path_for(path, config.input_root, config.output_root),
                random_seed=global_rng.randint(0, 2**32 - 1),
            )
        )
    return jobs


def _nested_output(config: RunConfig) -> list[Path]:
    input_root = config.input_root.resolve()
    output_root = config.output_root.resolve()
    if output_root == input_root:
        raise InvalidConfigurationError(f"输出目录不能与输入目录相同: {output_root}")
    if input_root in output_root.parents:
        return [output_root]
    return []


def _emit_progress(
    callback: ProgressCallback,
    completed: int,
    total: int,
    job: Job,
    *,
    status: str,
) -> None:
    if not callback:
        return
    callback(
        ProgressUpdate(
            total=total,
            completed=completed,
            source_path=job.source_path,
            output_path=job.output_path,
            status=status,
        )
    )
