"""命令行入口。"""

from __future__ import annotations

import logging
import random
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Callable, Mapping, Optional

import typer
from rich.console import Console
from rich.markup import escape

from spookify.cli.arguments import FlagValue, parse_arguments
from spookify.core.config import DEFAULT_ASSETS_DIR, DEFAULT_OUTPUT_DIR, RunConfig
from spookify.core.exceptions import InvalidConfigurationError, MalformedInvocationError
from spookify.core.models import BatchResult
from spookify.core.output_manager import MIRROR_MODES
from spookify.core.progress import ProgressUpdate
from spookify.processing.pipeline import process_batch
from spookify.utils.logging import setup_logging

app = typer.Typer(add_completion=False, help="Turn all your images into spooky images.")

EXCLAMATIONS = ("Boo!", "Eek!", "Yikes!", "Spooky!", "Aaah!", "Creepy!", "Gotcha!")

EXIT_FAILURE = 1
EXIT_MALFORMED = 2


def _package_version() -> str:
    try:
        return version("spookify")
    except PackageNotFoundError:
        return "0.0.0+unknown"


def _print_version(console: Console) -> None:
    console.print(f"👻 spookify v{_package_version()} — Turn all your images into spooky images.")
    console.print()


def _print_help(console: Console) -> None:
    _print_version(console)
    console.print("🎃 Usage: spookify \\[IMAGES_ROOT] \\[OPTIONS]")
    console.print()
    console.print("🦴  Valid values for OPTIONS:")
    console.print("     --output=dest        Specify a destination for the output.")
    console.print("     --mirror=structure   Mirror mode: structure (default) or full.")
    console.print("     --assets=DIR         Use overlay images from DIR.")
    console.print("     --seed=N             Seed the corner shuffle for repeatable output.")
    console.print("     --strict             Exit with a non-zero status on failure.")
    console.print("     --verbose            Print debug logging.")
    console.print("     --version            Print the current version.")
    console.print("     --help               Print the help message.")
    console.print()


def _print_error(console: Console, detail: Optional[str] = None) -> None:
    console.print("💀 [red]Boo![/red] You did something wrong.")
    console.print("   Sorry, let's try that again.")
    if detail:
        console.print(f"   {escape(detail)}")
    console.print()
    console.print("   Check out `spookify --help` to see what you can try.")
    console.print()


def _string_flag(flags: Mapping[str, FlagValue], name: str) -> Optional[str]:
    value = flags.get(name)
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise InvalidConfigurationError(f"--{name} 需要一个值，例如 --{name}=...")
    return value


def build_config(input_path: Optional[str], flags: Mapping[str, FlagValue]) -> RunConfig:
    """根据解析后的参数构建运行配置。"""

    if input_path is None:
        raise MalformedInvocationError("缺少输入目录")

    # 与 --output 缺省一样，空值回落到默认输出目录。
    output = _string_flag(flags, "output") if flags.get("output") != "" else None
    assets = _string_flag(flags, "assets")
    mirror_mode = _string_flag(flags, "mirror") or "structure"
    if mirror_mode not in MIRROR_MODES:
        raise InvalidConfigurationError(f"未知的镜像模式: {mirror_mode}")

    seed_value = _string_flag(flags, "seed")
    try:
        random_seed = int(seed_value) if seed_value is not None else None
    except ValueError as exc:
        raise InvalidConfigurationError(f"--seed 必须为整数: {seed_value}") from exc

    return RunConfig(
        input_root=Path(input_path).expanduser(),
        output_root=Path(output).expanduser() if output else DEFAULT_OUTPUT_DIR,
        assets_dir=Path(assets).expanduser() if assets else DEFAULT_ASSETS_DIR,
        mirror_mode=mirror_mode,
        random_seed=random_seed,
    )


def _build_progress_callback(console: Console, rng: random.Random) -> Callable[[ProgressUpdate], None]:
    def callback(update: ProgressUpdate) -> None:
        if update.status == "mirroring":
            console.print("[dim]Preparing output[/dim]")
        elif update.status == "processing":
            position = escape(f"[{update.completed + 1}/{update.total}]")
            console.print(f" [dim]… {position} {escape(str(update.source_path))}[/dim]")
        elif update.status == "done":
            exclamation = rng.choice(EXCLAMATIONS)
            console.print(f" [green]↗[/green] {exclamation} [bold]{escape(str(update.output_path))}[/bold]")

    return callback


def _print_summary(console: Console, result: BatchResult) -> None:
    console.print()
    if result.ok:
        console.print("[green]✓ Successful spookification[/green]")
        console.print(f"   {len(result.succeeded)} image(s) in {result.elapsed:.2f}s")
    else:
        console.print("[red]↻ Something went wrong[/red]")
        console.print(f"Error message: {escape(str(result.error))}")
        console.print(f"   {len(result.succeeded)} of {result.total} image(s) in {result.elapsed:.2f}s")
    console.print()


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "help_option_names": [],
    }
)
def run_cli(ctx: typer.Context) -> None:
    """spookify [IMAGES_ROOT] [--output=dest] [--help] [--version]"""

    console = Console(highlight=False, emoji=False, soft_wrap=True)
    tokens = list(ctx.args)
    strict = any(token == "--strict" or token.startswith("--strict=") for token in tokens)

    try:
        parsed = parse_arguments(tokens)
    except MalformedInvocationError:
        _print_error(console)
        raise typer.Exit(code=EXIT_MALFORMED if strict else 0)

    flags = parsed.flags
    if flags.get("help"):
        _print_help(console)
        raise typer.Exit()
    if flags.get("version"):
        _print_version(console)
        raise typer.Exit()

    setup_logging(logging.DEBUG if flags.get("verbose") else logging.WARNING)

    try:
        config = build_config(parsed.input, flags)
    except (MalformedInvocationError, InvalidConfigurationError) as exc:
        _print_error(console, str(exc))
        raise typer.Exit(code=EXIT_MALFORMED if strict else 0)

    logging.getLogger(__name__).debug("CLI 参数解析完成: %s", config)
    console.print("Getting ready to scare the images")

    rng = random.Random(config.random_seed)
    with console.status("Spookifying…"):
        result = process_batch(config, progress_callback=_build_progress_callback(console, rng))

    _print_summary(console, result)
    if strict and not result.ok:
        raise typer.Exit(code=EXIT_FAILURE)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
