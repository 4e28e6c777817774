import logging
import logging.config
from contextlib import contextmanager
from pathlib import Path

import click
import httpx
from pydantic import ValidationError

import lpm
from lpm.annotate import config_annotation_manifest, parse_annotations
from lpm.dockerfile import parse_file
from lpm.oci import (
    AuthenticationError,
    Client,
    ImageReference,
    Manifest,
    verify_reference,
)
from lpm.oci.client import DEFAULT_TIMEOUT

logger = logging.getLogger("lpm")

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "[%(levelname)s] %(message)s",
        },
    },
    "handlers": {
        "default": {
            "formatter": "default",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "lpm": {"handlers": ["default"], "level": "INFO", "propagate": False},
    },
}


def configure_logging(debug: bool = False):
    logging.config.dictConfig(LOGGING_CONFIG)
    if debug:
        logger.setLevel(logging.DEBUG)


@contextmanager
def handle_errors():
    """Report failures as a message and a non-zero exit status"""
    try:
        yield
    except KeyError as e:
        # str() of a KeyError is the repr of its key
        raise click.ClickException(str(e.args[0]) if e.args else str(e)) from e
    except (
        ValidationError,
        ValueError,
        AuthenticationError,
        httpx.HTTPError,
    ) as e:
        raise click.ClickException(str(e)) from e


def registry_options(f):
    """Options shared by every command that can push an artifact"""
    f = click.option("-D", "--debug", help="Debug output", is_flag=True)(f)
    f = click.option(
        "--timeout",
        help="Registry timeout in seconds",
        type=float,
        default=DEFAULT_TIMEOUT,
        show_default=True,
    )(f)
    f = click.option("--insecure", help="Use http for the registry", is_flag=True)(f)
    f = click.option(
        "-o",
        "--output",
        help="Write the generated manifest to this file (default: stdout)",
        type=click.File("w"),
        default="-",
    )(f)
    f = click.option(
        "-t",
        "--lpm-manifest-artifact-ref",
        "target",
        help="Push the generated manifest to this reference",
        default=None,
    )(f)
    f = click.option(
        "-s",
        "--subject-image-ref",
        help="Subject image reference, e.g. myregistry.io/myimage:latest",
        required=True,
    )(f)
    f = click.option(
        "-p", "--password", help="Password", envvar="LPM_PASSWORD", default=None
    )(f)
    f = click.option(
        "-u", "--username", help="Username", envvar="LPM_USERNAME", default=None
    )(f)
    return f


def push(
    manifest: Manifest,
    target: ImageReference,
    subject: str,
    username: str | None,
    password: str | None,
    insecure: bool,
    timeout: float,
):
    logger.info(
        "Pushing to '%s' as a reference to subject image '%s'", target, subject
    )
    with Client(
        registry_url=target.registry_url(insecure=insecure),
        username=username,
        password=password,
        scope=f"repository:{target.name}:pull,push",
        timeout=timeout,
    ) as client:
        lpm.publish(manifest, reference=str(target), target=client)


@click.group()
def cli():
    """Analyze, generate, and push layer provenance metadata (lpm) of images"""


@cli.command()
@click.option(
    "-d",
    "--dockerfile",
    help="Dockerfile of the subject image",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
)
@click.option(
    "-m",
    "--subject-image-manifest",
    "manifest_path",
    help="Manifest JSON of the subject image",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
)
@registry_options
def analyze(
    dockerfile: Path,
    manifest_path: Path,
    username: str | None,
    password: str | None,
    subject_image_ref: str,
    target: str | None,
    output,
    insecure: bool,
    timeout: float,
    debug: bool,
):
    """Generate layer provenance metadata of an image from its Dockerfile."""
    configure_logging(debug)
    with handle_errors():
        ImageReference.from_string(subject_image_ref)
        reference = ImageReference.from_string(target) if target else None
        instructions = parse_file(dockerfile)
        subject = Manifest.from_path(manifest_path)
        manifest = lpm.analyze(instructions, subject)

        if reference is not None:
            verify_reference(reference, manifest.descriptor)

        # Written before pushing, a failed push leaves the output in place
        output.write(manifest.to_json())
        output.flush()

        if reference is not None:
            push(
                manifest,
                target=reference,
                subject=subject_image_ref,
                username=username,
                password=password,
                insecure=insecure,
                timeout=timeout,
            )


@cli.command("config-annotate")
@click.option(
    "-m",
    "--manifest-media-type",
    help="Media type of the generated manifest",
    required=True,
)
@click.option(
    "-c",
    "--config-media-type",
    help="Media type of the generated manifest's config",
    required=True,
)
@click.option(
    "-a",
    "--annotation",
    "annotations",
    help="'key: value' annotation to add to the config, repeatable",
    multiple=True,
    required=True,
)
@registry_options
def config_annotate(
    manifest_media_type: str,
    config_media_type: str,
    annotations: tuple[str, ...],
    username: str | None,
    password: str | None,
    subject_image_ref: str,
    target: str | None,
    output,
    insecure: bool,
    timeout: float,
    debug: bool,
):
    """Generate a manifest whose config carries the given annotations."""
    configure_logging(debug)
    with handle_errors():
        ImageReference.from_string(subject_image_ref)
        reference = ImageReference.from_string(target) if target else None
        manifest = config_annotation_manifest(
            manifest_media_type=manifest_media_type,
            config_media_type=config_media_type,
            annotations=parse_annotations(list(annotations)),
        )

        if reference is not None:
            verify_reference(reference, manifest.descriptor)

        output.write(manifest.to_json())
        output.flush()

        if reference is not None:
            push(
                manifest,
                target=reference,
                subject=subject_image_ref,
                username=username,
                password=password,
                insecure=insecure,
                timeout=timeout,
            )


if __name__ == "__main__":
    cli()
