from typing import Any

from .descriptor import Descriptor


class EmptyConfig(Descriptor):
    """The `{}` config blob, for artifacts that only carry annotations

    ref: https://github.com/opencontainers/image-spec/blob/main/manifest.md#guidance-for-an-empty-descriptor
    """

    mediaType: str = "application/vnd.oci.empty.v1+json"
    digest: str = (
        "sha256:44136fa355b3678a1146ad16f7e8649e94fb4fc21fe77e8310c060f61caaff8a"
    )
    size: int = 2

    def model_post_init(self, __context: Any) -> None:
        self.data = b"{}"
