from pathlib import Path

import pytest

from lpm.oci import Manifest

TEST_DATA = Path(__file__).parent / "testdata"


@pytest.fixture
def testdata() -> Path:
    """Return the testdata dir for this module"""
    return TEST_DATA


@pytest.fixture
def subject(testdata) -> Manifest:
    """Subject image manifest with 4 layers"""
    return Manifest.from_path(testdata / "manifest.json")
