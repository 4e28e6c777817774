import json
from pathlib import Path

from pydantic import BaseModel

from lpm.oci.descriptor import Descriptor, digest_of


class Manifest(BaseModel):
    """
    ref: https://github.com/opencontainers/image-spec/blob/main/manifest.md
    """

    schemaVersion: int = 2
    mediaType: str = "application/vnd.oci.image.manifest.v1+json"
    artifactType: str | None = None
    config: Descriptor
    layers: list[Descriptor] = []
    subject: Descriptor | None = None
    annotations: dict[str, str] | None = None

    @property
    def descriptor(self) -> Descriptor:
        """Descriptor of the compact serialized manifest, as it is pushed"""
        data = self.model_dump_json(exclude_none=True).encode("utf-8")
        return Descriptor(
            mediaType=self.mediaType,
            digest=digest_of(data),
            size=len(data),
            data=data,
        )

    def to_json(self) -> str:
        """Pretty printed manifest with stable key order"""
        return json.dumps(
            self.model_dump(mode="json", exclude_none=True), indent=2, sort_keys=True
        )

    @classmethod
    def from_path(cls, path: Path) -> "Manifest":
        return cls.model_validate_json(path.read_bytes())
