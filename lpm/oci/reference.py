import re
from dataclasses import dataclass

DOCKER_IO = "docker.io"

REGISTRY_PATTERN = r"[a-zA-Z0-9-]+(?:\.[a-zA-Z0-9-]+)*(?::[0-9]+)?"
NAME_COMPONENT_PATTERN = r"[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*"
TAG_PATTERN = r"[\w][\w.-]{0,127}"
DIGEST_PATTERN = r"[a-z0-9]+(?:[.+_-][a-z0-9]+)*:[0-9a-fA-F]{32,}"
REFERENCE_PATTERN = (
    rf"^(?:(?P<registry>{REGISTRY_PATTERN})/)?"
    rf"(?P<name>{NAME_COMPONENT_PATTERN}(?:/{NAME_COMPONENT_PATTERN})*)"
    rf"(?::(?P<tag>{TAG_PATTERN}))?"
    rf"(?:@(?P<digest>{DIGEST_PATTERN}))?$"
)
REFERENCE_RE = re.compile(REFERENCE_PATTERN)


def _is_registry(component: str) -> bool:
    return "." in component or ":" in component or component == "localhost"


@dataclass(slots=True)
class ImageReference:
    """Image reference in the `registry/name:tag@digest` form

    ref: https://github.com/distribution/reference/blob/main/reference.go
    """

    registry: str
    name: str
    tag: str | None = None
    digest: str | None = None

    def __str__(self):
        result = f"{self.registry}/{self.name}"
        if self.tag:
            result += f":{self.tag}"
        if self.digest:
            result += f"@{self.digest}"
        return result

    @property
    def reference(self) -> str:
        """Manifest reference to address in the registry API, digest over tag"""
        return self.digest or self.tag

    def registry_url(self, insecure: bool = False) -> str:
        scheme = "http" if insecure else "https"
        return f"{scheme}://{self.registry}"

    @classmethod
    def from_string(cls, value: str) -> "ImageReference":
        """Parse an image reference, filling in Docker Hub defaults"""
        match = REFERENCE_RE.fullmatch(value)
        if not match:
            raise ValueError(f"Invalid image reference: {value}")
        registry, name = match["registry"], match["name"]
        if registry is not None and not _is_registry(registry):
            # Not a hostname, part of the repository path
            name = f"{registry}/{name}"
            registry = None
        if registry is None:
            registry = DOCKER_IO
        if registry == DOCKER_IO and "/" not in name:
            name = f"library/{name}"
        tag = match["tag"]
        if tag is None and match["digest"] is None:
            tag = "latest"
        return cls(registry=registry, name=name, tag=tag, digest=match["digest"])
