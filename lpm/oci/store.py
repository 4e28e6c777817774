"""Content addressable staging of artifacts and copying them to a registry"""
import logging
from typing import Protocol

from lpm.oci.descriptor import Descriptor, digest_of
from lpm.oci.manifest import Manifest
from lpm.oci.reference import ImageReference

logger = logging.getLogger(__name__)


class Target(Protocol):
    """Destination store of a copy, e.g. `lpm.oci.Client`"""

    def push_blob(self, name: str, blob: bytes, digest: str):
        ...

    def push_manifest(
        self, name: str, descriptor: Descriptor, reference: str | None = None
    ) -> str:
        ...


class MemoryStore:
    """In-memory content store, blobs keyed by digest and manifests by reference"""

    def __init__(self):
        self._blobs: dict[str, bytes] = {}
        self._descriptors: dict[str, Descriptor] = {}
        self._references: dict[str, Descriptor] = {}

    def __contains__(self, digest: str) -> bool:
        return digest in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)

    def put(self, descriptor: Descriptor, data: bytes):
        if digest_of(data) != descriptor.digest:
            raise ValueError(f"Content does not match digest {descriptor.digest}")
        if len(data) != descriptor.size:
            raise ValueError(
                f"Content size {len(data)} does not match {descriptor.size}"
                f" for {descriptor.digest}"
            )
        self._blobs[descriptor.digest] = data
        self._descriptors.setdefault(descriptor.digest, descriptor)

    def store_manifest(self, reference: str, descriptor: Descriptor, data: bytes):
        self.put(descriptor, data)
        self._references[reference] = descriptor

    def fetch(self, digest: str) -> bytes:
        return self._blobs[digest]

    def resolve(self, reference: str) -> Descriptor:
        try:
            return self._references[reference]
        except KeyError:
            raise KeyError(f"Unknown reference: {reference}") from None


def verify_reference(reference: ImageReference, descriptor: Descriptor):
    """Raise if `reference` pins a digest other than the one of `descriptor`"""
    if reference.digest is not None and reference.digest != descriptor.digest:
        raise ValueError(
            f"Reference digest {reference.digest} does not match"
            f" manifest digest {descriptor.digest}"
        )


def copy(source: MemoryStore, reference: str, destination: Target) -> str:
    """Push the manifest tagged `reference` in `source`, and its blobs, to `destination`

    Returns the digest the destination stored the manifest under.
    """
    descriptor = source.resolve(reference)
    data = source.fetch(descriptor.digest)
    manifest = Manifest.model_validate_json(data)
    target = ImageReference.from_string(reference)
    verify_reference(target, descriptor)

    pushed = set()
    for blob in [manifest.config, *manifest.layers]:
        if blob.digest in pushed:
            continue
        logger.debug("Pushing blob %s", blob.digest)
        destination.push_blob(
            name=target.name, blob=source.fetch(blob.digest), digest=blob.digest
        )
        pushed.add(blob.digest)

    return destination.push_manifest(
        name=target.name,
        descriptor=descriptor.model_copy(update={"data": data}),
        reference=target.reference,
    )
