"""Artifacts that only annotate the config of a subject image"""
import logging
import re

from lpm.oci.config import EmptyConfig
from lpm.oci.manifest import Manifest

logger = logging.getLogger(__name__)

SEPARATOR_RE = re.compile(r":\s*")


class InvalidAnnotationError(ValueError):
    """Raised for an annotation that is not in the `key: value` form."""


def parse_annotations(entries: list[str]) -> dict[str, str]:
    """Parse `key: value` entries into an annotation mapping, later keys win"""
    result = {}
    for entry in entries:
        annotation = SEPARATOR_RE.split(entry, maxsplit=1)
        if len(annotation) != 2 or not annotation[0]:
            raise InvalidAnnotationError(f"invalid annotation: {entry}")
        key, value = annotation
        logger.info("annotation: '%s: %s'", key, value)
        result[key] = value
    return result


def config_annotation_manifest(
    manifest_media_type: str, config_media_type: str, annotations: dict[str, str]
) -> Manifest:
    """Build a manifest without layers whose config carries `annotations`"""
    return Manifest(
        mediaType=manifest_media_type,
        config=EmptyConfig(mediaType=config_media_type, annotations=dict(annotations)),
        layers=[],
        annotations={},
    )
