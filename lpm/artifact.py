"""Reference artifacts describing a subject image without carrying its content

Every descriptor of a reference artifact points at the same empty blob, only
the annotations tell the descriptors apart.
"""
import logging

from lpm import constants
from lpm.oci.descriptor import EMPTY_DIGEST, Descriptor
from lpm.oci.manifest import Manifest
from lpm.oci.store import MemoryStore

logger = logging.getLogger(__name__)


def reference_descriptor(subject: Descriptor, media_type: str) -> Descriptor:
    """Return an empty descriptor annotated with the identity of `subject`

    :param subject: The annotated subject layer or config.
    :param media_type: Media type of the reference descriptor.
    """
    annotations = dict(subject.annotations or {})
    annotations[constants.ANNOTATION_SUBJECT_MEDIA_TYPE] = subject.mediaType
    annotations[constants.ANNOTATION_SUBJECT_DIGEST] = subject.digest
    annotations[constants.ANNOTATION_SUBJECT_SIZE] = str(subject.size)
    return Descriptor(
        mediaType=media_type,
        digest=EMPTY_DIGEST,
        size=0,
        annotations=annotations,
        data=b"",
    )


def assemble(subject: Manifest) -> Manifest:
    """Build the reference manifest for an annotated subject manifest

    Layers keep the subject's order, bottom layer first.
    """
    annotations = dict(subject.annotations or {})
    annotations[constants.ANNOTATION_SUBJECT_MEDIA_TYPE] = subject.mediaType
    return Manifest(
        schemaVersion=subject.schemaVersion,
        mediaType=constants.MEDIA_TYPE_MANIFEST,
        config=reference_descriptor(subject.config, constants.MEDIA_TYPE_CONFIG),
        layers=[
            reference_descriptor(layer, constants.MEDIA_TYPE_LAYER)
            for layer in subject.layers
        ],
        annotations=annotations,
    )


def stage(manifest: Manifest, store: MemoryStore, reference: str) -> Descriptor:
    """Add the manifest and its blobs to `store`, tag the manifest `reference`"""
    for descriptor in [manifest.config, *manifest.layers]:
        if descriptor.data is None:
            raise ValueError(f"Missing data for {descriptor.digest}")
        store.put(descriptor, descriptor.data)
    descriptor = manifest.descriptor
    store.store_manifest(reference, descriptor, descriptor.data)
    logger.debug("Staged %s as %s", descriptor.digest, reference)
    return descriptor
