from hashlib import sha256

from pydantic import BaseModel, Field


def digest_of(data: bytes) -> str:
    return f"sha256:{sha256(data).hexdigest()}"


EMPTY_DIGEST = digest_of(b"")


class Descriptor(BaseModel):
    """
    ref: https://github.com/opencontainers/image-spec/blob/main/descriptor.md
    """

    mediaType: str
    digest: str
    size: int
    urls: list[str] | None = None
    annotations: dict[str, str] | None = None
    artifactType: str | None = None
    data: bytes | None = Field(exclude=True, default=None)
