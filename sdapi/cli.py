"""CLI application and commands for sdapi."""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape

from sdapi import SDClient, __version__
from sdapi.config import ExtrasResizeMode, Upscaler, load_settings
from sdapi.display import display_memory, display_models, display_options, display_progress, display_saved
from sdapi.errors import SDAPIError
from sdapi.images import save_images
from sdapi.params import ExtraSingleImageOptions, Img2ImgOptions, Txt2ImgOptions

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sdapi.config import Settings


def _version_callback(value: bool) -> None:
    if value:
        print(f"sdapi {__version__}")
        raise typer.Exit


app = typer.Typer(
    name="sdapi",
    help="Drive a Stable Diffusion web UI server through its sdapi/v1 API.",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def _main(
    ctx: typer.Context,
    url: Annotated[str | None, typer.Option("--url", "-u", help="Server base URL")] = None,
    username: Annotated[str | None, typer.Option("--username", help="Basic auth username")] = None,
    password: Annotated[str | None, typer.Option("--password", help="Basic auth password")] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", help="Request timeout in seconds")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    _version: Annotated[
        bool,
        typer.Option("--version", "-V", callback=_version_callback, is_eager=True, help="Show version and exit."),
    ] = False,
) -> None:
    """Drive a Stable Diffusion web UI server through its sdapi/v1 API."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    settings = load_settings()
    overrides: dict[str, Any] = {
        k: v
        for k, v in {"url": url, "username": username, "password": password, "timeout": timeout}.items()
        if v is not None
    }
    ctx.obj = replace(settings, **overrides)


@contextmanager
def _client(ctx: typer.Context) -> Iterator[SDClient]:
    """Open a client from the resolved settings, turning API errors into exit code 1."""
    settings: Settings = ctx.obj
    try:
        with SDClient.from_config(settings) as c:
            yield c
    except SDAPIError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e


def _warn_skipped(skipped: int) -> None:
    if skipped:
        console.print(f"[yellow]Warning: {skipped} image(s) could not be decoded[/yellow]")


def _parse_value(raw: str) -> Any:
    """Option values are JSON when they parse as JSON, plain strings otherwise."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


@app.command()
def txt2img(
    ctx: typer.Context,
    prompt: Annotated[str, typer.Argument(help="Text prompt")],
    negative: Annotated[str, typer.Option("-n", "--negative", help="Negative prompt")] = "",
    steps: Annotated[int, typer.Option("--steps", help="Sampling steps")] = 20,
    cfg: Annotated[float, typer.Option("--cfg", help="CFG scale")] = 7.0,
    width: Annotated[int, typer.Option("-W", "--width", help="Image width")] = 512,
    height: Annotated[int, typer.Option("-H", "--height", help="Image height")] = 512,
    sampler: Annotated[str, typer.Option("--sampler", help="Sampler name")] = "",
    seed: Annotated[int, typer.Option("--seed", help="Seed (-1 for random)")] = -1,
    batch: Annotated[int, typer.Option("-b", "--batch", help="Images per batch")] = 1,
    output: Annotated[Path, typer.Option("-o", "--output", help="Output directory")] = Path(),
) -> None:
    """Generate images from a text prompt."""
    opt = Txt2ImgOptions(
        prompt=prompt,
        negative_prompt=negative,
        steps=steps,
        cfg_scale=cfg,
        width=width,
        height=height,
        sampler_name=sampler,
        seed=seed,
        batch_size=batch,
    )
    with _client(ctx) as c, console.status("[cyan]Generating...[/cyan]"):
        res = c.txt2img(opt)
    paths = save_images(res.png_images, output, prefix="txt2img")
    display_saved(paths, console)
    _warn_skipped(res.skipped)


@app.command()
def img2img(
    ctx: typer.Context,
    prompt: Annotated[str, typer.Argument(help="Text prompt")],
    image: Annotated[Path, typer.Argument(help="Source image (PNG)")],
    mask: Annotated[Path | None, typer.Option("--mask", help="Inpainting mask (PNG)")] = None,
    denoise: Annotated[float, typer.Option("-d", "--denoise", help="Denoising strength")] = 0.75,
    negative: Annotated[str, typer.Option("-n", "--negative", help="Negative prompt")] = "",
    steps: Annotated[int, typer.Option("--steps", help="Sampling steps")] = 20,
    cfg: Annotated[float, typer.Option("--cfg", help="CFG scale")] = 7.0,
    width: Annotated[int, typer.Option("-W", "--width", help="Image width (server default if 0)")] = 0,
    height: Annotated[int, typer.Option("-H", "--height", help="Image height (server default if 0)")] = 0,
    sampler: Annotated[str, typer.Option("--sampler", help="Sampler name")] = "",
    seed: Annotated[int, typer.Option("--seed", help="Seed (-1 for random)")] = -1,
    output: Annotated[Path, typer.Option("-o", "--output", help="Output directory")] = Path(),
) -> None:
    """Transform an existing image."""
    for p in (image, mask):
        if p is not None and not p.is_file():
            console.print(f"[red]Error: File not found: {p}[/red]")
            raise typer.Exit(1)

    opt = Img2ImgOptions(
        init_images=[image],
        mask=mask,
        denoising_strength=denoise,
        prompt=prompt,
        negative_prompt=negative,
        steps=steps,
        cfg_scale=cfg,
        width=width,
        height=height,
        sampler_name=sampler,
        seed=seed,
    )
    with _client(ctx) as c, console.status("[cyan]Generating...[/cyan]"):
        res = c.img2img(opt)
    paths = save_images(res.png_images, output, prefix="img2img")
    display_saved(paths, console)
    _warn_skipped(res.skipped)


@app.command()
def upscale(
    ctx: typer.Context,
    image: Annotated[Path, typer.Argument(help="Image to upscale (PNG)")],
    scale: Annotated[float, typer.Option("-s", "--scale", help="Upscale factor")] = 2.0,
    width: Annotated[int, typer.Option("-W", "--width", help="Target width (overrides --scale)")] = 0,
    height: Annotated[int, typer.Option("-H", "--height", help="Target height (overrides --scale)")] = 0,
    upscaler: Annotated[Upscaler, typer.Option("--upscaler", help="Upscaler model")] = Upscaler.esrgan_4x,
    output: Annotated[Path, typer.Option("-o", "--output", help="Output directory")] = Path(),
) -> None:
    """Upscale a single image with extra-single-image."""
    if not image.is_file():
        console.print(f"[red]Error: File not found: {image}[/red]")
        raise typer.Exit(1)

    opt = ExtraSingleImageOptions(
        resize_mode=ExtrasResizeMode.scale_to if width and height else ExtrasResizeMode.scale_by,
        upscaling_resize=scale,
        upscaling_resize_w=width,
        upscaling_resize_h=height,
        upscaler_1=upscaler.value,
        image=image,
    )
    with _client(ctx) as c, console.status("[cyan]Upscaling...[/cyan]"):
        res = c.extra_single_image(opt)
    if res.parsed_image is None or res.raw_image is None:
        console.print("[red]Error: Server returned no decodable image.[/red]")
        raise typer.Exit(1)
    paths = save_images([res.raw_image], output, prefix="upscaled")
    display_saved(paths, console)


@app.command()
def progress(
    ctx: typer.Context,
    with_image: Annotated[bool, typer.Option("--with-image", help="Save the live preview as progress.png")] = False,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show progress of the running job."""
    with _client(ctx) as c:
        res = c.progress(skip_current_image=not with_image)

    if json_output:
        console.print_json(data=res.model_dump(mode="json", exclude={"current_image"}))
    else:
        display_progress(res, console)

    if with_image:
        preview = res.current_image_decoded()
        if preview is None:
            console.print("[yellow]No preview image available.[/yellow]")
        else:
            preview.save("progress.png")
            console.print("[green]Saved:[/green] progress.png")


@app.command()
def options(
    ctx: typer.Context,
    key: Annotated[list[str] | None, typer.Option("--key", "-k", help="Show only these option(s)")] = None,
    set_values: Annotated[list[str] | None, typer.Option("--set", help="Set an option (KEY=VALUE)")] = None,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show or update server options."""
    if set_values:
        updates: dict[str, Any] = {}
        for item in set_values:
            name, sep, raw = item.partition("=")
            if not sep or not name:
                console.print(f"[red]Error: Use format KEY=VALUE (got '{item}')[/red]")
                raise typer.Exit(1)
            updates[name] = _parse_value(raw)
        with _client(ctx) as c:
            c.set_options(updates)
        console.print(f"[green]Updated {len(updates)} option(s)[/green]")
        return

    with _client(ctx) as c:
        current = c.options().to_body()

    if key:
        current = {k: current.get(k) for k in key}
    if json_output:
        console.print_json(data=current)
    else:
        display_options(current, console)


@app.command()
def models(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """List available checkpoints."""
    with _client(ctx) as c:
        result = c.sd_models()

    if json_output:
        console.print_json(data=[m.model_dump(mode="json") for m in result])
    else:
        display_models(result, console)


@app.command()
def memory(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show RAM and CUDA memory statistics."""
    with _client(ctx) as c:
        res = c.memory()

    if json_output:
        console.print_json(data=res.model_dump(mode="json"))
    else:
        display_memory(res, console)


def main() -> int:
    """Main entry point."""
    app()
    return 0


if __name__ == "__main__":
    sys.exit(main())
