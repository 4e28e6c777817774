"""Layer provenance metadata for container images

Decide for every layer of an image whether it was built by the image's own
Dockerfile or inherited from its base image, and package that as an
annotation-only OCI artifact.
"""
import logging
from collections.abc import Sequence

from lpm.artifact import assemble, reference_descriptor, stage
from lpm.correlate import annotate_manifest
from lpm.dockerfile import Instruction
from lpm.oci import Manifest, MemoryStore, Target, copy

logger = logging.getLogger(__name__)


def analyze(instructions: Sequence[Instruction], subject: Manifest) -> Manifest:
    """Return the layer provenance reference manifest of `subject`

    :param instructions: The parsed Dockerfile of the subject image.
    :param subject: The subject image manifest, left untouched.
    """
    annotated = annotate_manifest(instructions, subject)
    return assemble(annotated)


def publish(manifest: Manifest, reference: str, target: Target) -> str:
    """Push a reference manifest to `target` tagged as `reference`

    :param manifest: The manifest to push, with the content of its blobs set.
    :param reference: The full image reference to push to.
    :param target: The registry to push to.
    :return: The digest of the pushed manifest.
    """
    store = MemoryStore()
    stage(manifest, store=store, reference=reference)
    logger.info("Pushing to '%s'", reference)
    digest = copy(store, reference=reference, destination=target)
    logger.info("Pushed to '%s' with digest '%s'", reference, digest)
    return digest


__all__ = [
    "analyze",
    "annotate_manifest",
    "assemble",
    "publish",
    "reference_descriptor",
]
