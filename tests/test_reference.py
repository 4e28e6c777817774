import pytest

from lpm.oci import ImageReference

DIGEST = f"sha256:{'a' * 64}"


@pytest.mark.parametrize(
    "value,expected,reference",
    [
        (
            "myregistry.myserver.io/myimage:latest",
            ImageReference("myregistry.myserver.io", "myimage", "latest"),
            "latest",
        ),
        (
            "localhost:5000/team/myimage-lpm:v1",
            ImageReference("localhost:5000", "team/myimage-lpm", "v1"),
            "v1",
        ),
        (
            f"myregistry.io/myimage@{DIGEST}",
            ImageReference("myregistry.io", "myimage", digest=DIGEST),
            DIGEST,
        ),
        (
            f"myregistry.io/myimage:v1@{DIGEST}",
            ImageReference("myregistry.io", "myimage", "v1", DIGEST),
            DIGEST,
        ),
        ("ubuntu", ImageReference("docker.io", "library/ubuntu", "latest"), "latest"),
        (
            "someone/tool:1.0",
            ImageReference("docker.io", "someone/tool", "1.0"),
            "1.0",
        ),
        ("localhost/lpm", ImageReference("localhost", "lpm", "latest"), "latest"),
    ],
)
def test_from_string(value, expected, reference):
    assert (parsed := ImageReference.from_string(value)) == expected
    assert parsed.reference == reference


@pytest.mark.parametrize(
    "value", ["", "MyImage", "registry.io/", "myimage:", "myimage@sha256:xyz"]
)
def test_from_string_invalid(value):
    with pytest.raises(ValueError, match="Invalid image reference"):
        ImageReference.from_string(value)


def test_str():
    value = f"localhost:5000/team/lpm:v1@{DIGEST}"
    assert str(ImageReference.from_string(value)) == value
    assert str(ImageReference.from_string("ubuntu")) == "docker.io/library/ubuntu:latest"


@pytest.mark.parametrize("insecure,expected", [(False, "https"), (True, "http")])
def test_registry_url(insecure, expected):
    reference = ImageReference.from_string("localhost:5000/lpm:v1")
    assert reference.registry_url(insecure=insecure) == f"{expected}://localhost:5000"
