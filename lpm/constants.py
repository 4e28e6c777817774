"""Annotation keys and media types of layer provenance metadata artifacts"""

ANNOTATION_PREFIX = "io.azurecr.lpm.v1.subject"

# Ownership of the subject layer, "upstream" or "non-upstream"
ANNOTATION_AUTHORS = f"{ANNOTATION_PREFIX}.authors"
ANNOTATION_URL = f"{ANNOTATION_PREFIX}.url"
ANNOTATION_SOURCE = f"{ANNOTATION_PREFIX}.source"
ANNOTATION_VENDOR = f"{ANNOTATION_PREFIX}.vendor"
OWNERSHIP_KEYS = (
    ANNOTATION_AUTHORS,
    ANNOTATION_URL,
    ANNOTATION_SOURCE,
    ANNOTATION_VENDOR,
)

# Dockerfile instruction that produced the subject layer
ANNOTATION_DOCKERFILE_COMMAND = f"{ANNOTATION_PREFIX}.dockerfile.fullcommand"

# Identity of the subject descriptor
ANNOTATION_SUBJECT_MEDIA_TYPE = f"{ANNOTATION_PREFIX}.mediaType"
ANNOTATION_SUBJECT_DIGEST = f"{ANNOTATION_PREFIX}.digest"
ANNOTATION_SUBJECT_SIZE = f"{ANNOTATION_PREFIX}.size"

MEDIA_TYPE_MANIFEST = "application/io.azurecr.distribution.manifest.v2.lpm.v1+json"
MEDIA_TYPE_CONFIG = "application/io.azurecr.container.image.v1.lpm.v1+json"
MEDIA_TYPE_LAYER = "application/io.azurecr.image.rootfs.diff.tar.gzip.lpm.v1+json"

UPSTREAM = "upstream"
NON_UPSTREAM = "non-upstream"
