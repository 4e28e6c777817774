from __future__ import annotations

import logging
from urllib.parse import urlparse, urlunparse

import httpx

from lpm.oci.descriptor import Descriptor

logger = logging.getLogger(__name__)

DOCKER_HUB = "registry-1.docker.io"
DEFAULT_TIMEOUT = 30.0


class AuthenticationError(Exception):
    """Raised when authentication fails."""


def _clean_url(registry_url: str) -> str:
    parts = urlparse(registry_url)
    if not parts.scheme:
        parts = urlparse(f"https://{registry_url}")
    if parts.netloc == "docker.io":
        parts = parts._replace(netloc=DOCKER_HUB)
    return urlunparse(parts).rstrip("/")


def _parse_www_auth(www_authenticate: str) -> dict[str, str]:
    """Parse the WWW-Authenticate header"""
    result = {}
    for item in www_authenticate.removeprefix("Bearer ").split(","):
        key, value = item.split("=", 1)
        result[key.strip()] = value.strip('"')
    return result


class BearerAuth(httpx.Auth):
    """Attaches HTTP Bearer Authentication to the given Request object."""

    def __init__(self, token: str):
        self.token = token

    def auth_flow(self, request):
        request.headers["Authorization"] = f"Bearer {self.token}"
        yield request


class Client:
    """Client for the OCI registry API."""

    def __init__(
        self,
        registry_url: str,
        username: str | None = None,
        password: str | None = None,
        scope: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.registry_url = _clean_url(registry_url)
        self.username = username
        self.password = password
        self.scope = scope
        self.timeout = timeout
        self._transport = transport
        self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def session(self):
        if self._session is None:
            self._session = httpx.Client(
                follow_redirects=True,
                max_redirects=2,
                timeout=self.timeout,
                transport=self._transport,
            )
            self.try_authentication()
        return self._session

    def head(self, uri, **kwargs):
        return self.session.head(f"{self.registry_url}{uri}", **kwargs)

    def get(self, uri, **kwargs):
        return self.session.get(f"{self.registry_url}{uri}", **kwargs)

    def post(self, uri, **kwargs):
        return self.session.post(f"{self.registry_url}{uri}", **kwargs)

    def put(self, uri, **kwargs):
        return self.session.put(f"{self.registry_url}{uri}", **kwargs)

    def close(self):
        if self._session is not None:
            self._session.close()
            self._session = None

    def try_authentication(self):
        result = self.get("/v2/")
        if result.status_code == 401:
            www_authenticate = _parse_www_auth(result.headers["WWW-Authenticate"])
            logger.debug(www_authenticate)
            self.authenticate(
                token_url=www_authenticate["realm"],
                service=www_authenticate.get("service"),
                scope=self.scope or www_authenticate.get("scope"),
            )
        else:
            result.raise_for_status()

    def authenticate(self, token_url, service, scope):
        """Use the token api with basic authentication to get a token

        ref: https://distribution.github.io/distribution/spec/auth/token/
        """
        if not self.password:
            raise AuthenticationError(
                f"{self.registry_url} requires authentication, "
                f"provide a username and/or password."
            )
        params = {"client_id": self.username}
        if service:
            params["service"] = service
        if scope:
            params["scope"] = scope
        response = self.session.get(
            token_url,
            params=params,
            auth=(self.username or "", self.password),
        )
        if response.status_code == 401:
            raise AuthenticationError(
                f"{self.registry_url} rejected the provided credentials."
            )
        response.raise_for_status()
        body = response.json()
        # Some registries only return `access_token`
        self.session.auth = BearerAuth(body.get("token") or body["access_token"])

    def push_blob(self, name: str, blob: bytes, digest: str):
        """Push a blob for repository `name`

        ref: https://github.com/opencontainers/distribution-spec/blob/main/spec.md#pushing-blobs
        """
        # Check if the blob already exists
        response = self.head(f"/v2/{name}/blobs/{digest}")
        if response.status_code == 200:
            logger.info("Blob already exists: %s:%s", name, digest)
            return

        # Push the blob using the POST then PUT method
        response = self.post(
            f"/v2/{name}/blobs/uploads/",
            headers={"content-type": "application/octet-stream"},
        )
        response.raise_for_status()
        if response.status_code == 202:
            location = response.headers["location"]
            if location.startswith("/"):
                # Relative location, add the registry url
                put = self.put
            else:
                # Absolute location, use the location as is
                put = self.session.put
            response = put(
                location,
                content=blob,
                headers={"content-type": "application/octet-stream"},
                params={"digest": digest},
            )
            if response.status_code == 404:
                logger.info(response.json())
            response.raise_for_status()

    def push_manifest(
        self, name: str, descriptor: Descriptor, reference: str | None = None
    ) -> str:
        """Push a manifest for repository `name` and tag `reference`

        Returns the digest the registry stored the manifest under.

        ref: https://github.com/opencontainers/distribution-spec/blob/main/spec.md#pushing-manifests
        """
        if descriptor.data is None:
            raise ValueError("Missing manifest data")
        if reference is None:
            reference = descriptor.digest
        uri = f"/v2/{name}/manifests/{reference}"

        logger.debug("Pushing manifest: %s", descriptor.data)
        response = self.put(
            uri,
            content=descriptor.data,
            headers={"content-type": descriptor.mediaType},
        )

        if (
            not response.is_success
            and int(response.headers.get("Content-Length", 0)) > 0
            and "application/json" in response.headers.get("Content-Type", "")
        ):
            logger.error(response.json())
        response.raise_for_status()
        return response.headers.get("Docker-Content-Digest", descriptor.digest)
