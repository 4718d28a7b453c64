"""The `gemforge` command-line interface."""

import importlib.metadata
from pathlib import Path
from typing import Any

import click

from .config import load_build_defaults
from .crypto import generate_keys, load_public_key, write_key_pair
from .exceptions import BuildError, PackagingError, VerificationError
from .models import BuildOptions
from .packaging.orchestrator import BuildOrchestrator
from .packaging.reader import GemReader

try:
    __version__ = importlib.metadata.version("gemforge-builder")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0-dev"

BUILD_EPILOG = """\b
The gemspec can either be written by hand or kept alongside the project
sources. Gems can be saved to a specified filename with the output option:

\b
  $ gemforge build my_gem.gemspec --output=release.gem
"""


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(
    __version__,
    "-V",
    "--version",
    prog_name="gemforge",
    message="%(prog)s version %(version)s",
)
def cli() -> None:
    """Build and verify gems from gemspec files."""
    pass


def _flag_value(
    ctx: click.Context, name: str, value: bool, defaults: dict[str, Any]
) -> bool:
    """Prefers a flag given on the command line over the configured default."""
    if ctx.get_parameter_source(name) == click.core.ParameterSource.COMMANDLINE:
        return value
    return defaults.get(name, value)


@cli.command("build", epilog=BUILD_EPILOG)
@click.argument("gemspec_file", metavar="GEMSPEC_FILE", required=False)
@click.option("--platform", help="Specify the platform of gem to build.")
@click.option("--force/--no-force", default=False, help="Skip validation of the spec.")
@click.option(
    "--strict/--no-strict",
    default=False,
    help="Consider warnings as errors when validating the spec.",
)
@click.option("-o", "--output", help="Output gem with the given filename.")
@click.option(
    "-C",
    "build_path",
    metavar="PATH",
    help="Run as if gemforge build was started in <PATH> instead of the current working directory.",
)
@click.pass_context
def build_command(
    ctx: click.Context,
    gemspec_file: str | None,
    platform: str | None,
    force: bool,
    strict: bool,
    output: str | None,
    build_path: str | None,
) -> None:
    """Build a gem from a gemspec."""
    defaults = load_build_defaults()
    options = BuildOptions(
        platform=platform or defaults.get("platform"),
        force=_flag_value(ctx, "force", force, defaults),
        strict=_flag_value(ctx, "strict", strict, defaults),
        output=output or defaults.get("output"),
        build_path=build_path,
    )

    try:
        artifact = BuildOrchestrator(options).build(gemspec_file)
    except (BuildError, PackagingError) as e:
        click.secho(f"❌ ERROR:  {e}", fg="red", err=True)
        raise click.Abort() from e

    for warning in artifact.warnings:
        click.secho(f"WARNING:  {warning}", fg="yellow", err=True)

    spec = artifact.specification
    click.secho("✅ Successfully built RubyGem", fg="green")
    click.echo(f"  Name: {spec.name}")
    click.echo(f"  Version: {spec.version}")
    click.echo(f"  File: {artifact.path}")


@cli.command()
@click.option(
    "--out-dir",
    default="keys",
    type=click.Path(file_okay=False, writable=True, resolve_path=True),
    help="Directory to save the RSA signing key pair.",
)
def keygen(out_dir: str) -> None:
    """Generates an RSA key pair for gem signing."""
    out_path = Path(out_dir)
    private_path = out_path / "gem-private.key"
    public_path = out_path / "gem-public.key"
    if private_path.exists() or public_path.exists():
        click.secho(
            f"⚠️  Keys already exist in '{out_dir}'. To regenerate, please delete them first.",
            fg="yellow",
        )
        return

    out_path.mkdir(parents=True, exist_ok=True)
    private_key, _ = generate_keys()
    write_key_pair(private_key, private_path, public_path)
    click.secho(f"✅ Gem signing key pair generated in '{out_dir}'.", fg="green")


@cli.command("verify")
@click.argument(
    "package_file",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
)
@click.option(
    "--public-key-path",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    help="Check the gem's signatures against this public key.",
)
def verify_command(package_file: str, public_key_path: str | None) -> None:
    """Verifies the checksums and signatures of a built gem."""
    click.echo(f"🔍 Verifying package '{package_file}'...")
    try:
        reader = GemReader(Path(package_file))
        click.echo(reader.get_info())
        if public_key_path:
            reader.verify_signatures(load_public_key(Path(public_key_path)))
            click.secho("✅ Signature verification successful.", fg="green")
    except VerificationError as e:
        click.secho(f"❌ Verification failed: {e}", fg="red", err=True)
        raise click.Abort() from e

    click.secho("✅ Checksums verified.", fg="green")


main = cli
