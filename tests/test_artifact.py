import json

import pytest

import lpm
from lpm import constants
from lpm.artifact import assemble, reference_descriptor, stage
from lpm.dockerfile import parse_file
from lpm.oci import EMPTY_DIGEST, Descriptor, MemoryStore

E3B0 = "sha256:e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_empty_digest():
    assert EMPTY_DIGEST == E3B0


def test_reference_descriptor():
    subject = Descriptor(
        mediaType="application/vnd.oci.image.layer.v1.tar+gzip",
        digest=f"sha256:{'a' * 64}",
        size=1234,
        annotations={constants.ANNOTATION_AUTHORS: "upstream"},
    )
    descriptor = reference_descriptor(subject, constants.MEDIA_TYPE_LAYER)

    assert descriptor.mediaType == constants.MEDIA_TYPE_LAYER
    assert descriptor.digest == E3B0
    assert descriptor.size == 0
    assert descriptor.data == b""
    assert descriptor.annotations == {
        constants.ANNOTATION_AUTHORS: "upstream",
        constants.ANNOTATION_SUBJECT_MEDIA_TYPE: subject.mediaType,
        constants.ANNOTATION_SUBJECT_DIGEST: subject.digest,
        constants.ANNOTATION_SUBJECT_SIZE: "1234",
    }
    # The subject keeps its own annotations
    assert subject.annotations == {constants.ANNOTATION_AUTHORS: "upstream"}


def test_analyze(testdata, subject):
    instructions = parse_file(testdata / "Dockerfile")
    manifest = lpm.analyze(instructions, subject)

    assert manifest.schemaVersion == 2
    assert manifest.mediaType == constants.MEDIA_TYPE_MANIFEST
    assert manifest.annotations[constants.ANNOTATION_SUBJECT_MEDIA_TYPE] == (
        "application/vnd.docker.distribution.manifest.v2+json"
    )
    assert manifest.annotations[constants.ANNOTATION_VENDOR] == "non-upstream"

    assert manifest.config.mediaType == constants.MEDIA_TYPE_CONFIG
    assert manifest.config.annotations[constants.ANNOTATION_SUBJECT_DIGEST] == (
        subject.config.digest
    )
    assert manifest.config.annotations[constants.ANNOTATION_SUBJECT_SIZE] == "7023"

    assert len(manifest.layers) == len(subject.layers)
    for reference, layer in zip(manifest.layers, subject.layers):
        assert reference.mediaType == constants.MEDIA_TYPE_LAYER
        assert reference.annotations[constants.ANNOTATION_SUBJECT_DIGEST] == layer.digest
        assert reference.annotations[constants.ANNOTATION_SUBJECT_SIZE] == str(layer.size)
        assert reference.annotations[constants.ANNOTATION_SUBJECT_MEDIA_TYPE] == (
            layer.mediaType
        )
    assert [
        layer.annotations[constants.ANNOTATION_SOURCE] for layer in manifest.layers
    ] == ["upstream", "non-upstream", "non-upstream", "non-upstream"]
    assert [
        layer.annotations[constants.ANNOTATION_DOCKERFILE_COMMAND]
        for layer in manifest.layers
    ] == [
        "FROM python:3.12-slim",
        instructions[1].original,
        "COPY requirements.txt /app/",
        'CMD ["python", "-m", "app"]',
    ]


def test_assemble_all_descriptors_empty(testdata, subject):
    manifest = lpm.analyze(parse_file(testdata / "Dockerfile"), subject)
    for descriptor in [manifest.config, *manifest.layers]:
        assert descriptor.digest == E3B0
        assert descriptor.size == 0


def test_assemble_without_annotations(subject):
    # Assembling an unannotated manifest only adds the subject identity
    manifest = assemble(subject)
    assert manifest.annotations == {
        constants.ANNOTATION_SUBJECT_MEDIA_TYPE: subject.mediaType
    }
    assert set(manifest.layers[0].annotations) == {
        constants.ANNOTATION_SUBJECT_MEDIA_TYPE,
        constants.ANNOTATION_SUBJECT_DIGEST,
        constants.ANNOTATION_SUBJECT_SIZE,
    }


def test_to_json(testdata, subject):
    instructions = parse_file(testdata / "Dockerfile")
    first = lpm.analyze(instructions, subject).to_json()
    second = lpm.analyze(instructions, subject).to_json()
    assert first == second

    data = json.loads(first)
    assert list(data) == sorted(data)
    assert set(data) == {"annotations", "config", "layers", "mediaType", "schemaVersion"}
    assert "data" not in data["config"]
    assert data["layers"][0]["size"] == 0


def test_stage(testdata, subject):
    manifest = lpm.analyze(parse_file(testdata / "Dockerfile"), subject)
    store = MemoryStore()
    descriptor = stage(manifest, store=store, reference="localhost:5000/lpm:v1")

    assert store.resolve("localhost:5000/lpm:v1") == descriptor
    assert store.fetch(E3B0) == b""
    assert store.fetch(descriptor.digest) == descriptor.data
    # The empty blob and the manifest
    assert len(store) == 2


def test_stage_without_data(subject):
    with pytest.raises(ValueError, match="Missing data"):
        stage(subject, store=MemoryStore(), reference="localhost:5000/lpm:v1")
