"""OCI models and a registry client

This module provides the subset of the OCI image and distribution specs
needed to build and push annotation-only artifacts.
"""
from .client import AuthenticationError, Client
from .config import EmptyConfig
from .descriptor import EMPTY_DIGEST, Descriptor, digest_of
from .manifest import Manifest
from .reference import ImageReference
from .store import MemoryStore, Target, copy, verify_reference

__all__ = [
    "AuthenticationError",
    "Client",
    "EMPTY_DIGEST",
    "Descriptor",
    "EmptyConfig",
    "ImageReference",
    "Manifest",
    "MemoryStore",
    "Target",
    "copy",
    "digest_of",
    "verify_reference",
]
