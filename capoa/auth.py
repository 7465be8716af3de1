"""Pull secrets for assisted-service."""

from __future__ import annotations

import base64
import json
from typing import Any

from capoa.controlplane_api import OpenshiftAssistedControlPlane
from capoa.kubeclient import InMemoryClient

PULLSECRET_DATA_KEY = ".dockerconfigjson"

_FAKE_REGISTRY = "fake-pull-secret"
_FAKE_CREDENTIALS = b":".join((b"placeholder", b"secret")) + b"\n"


def generate_fake_pull_secret(name: str, namespace: str) -> dict[str, Any]:
    """A Secret with a placeholder pull secret in the shape assisted-service expects.

    The data key is .dockerconfigjson and its JSON holds "auths" with one
    registry carrying an "auth" entry.
    """
    encoded_credentials = base64.b64encode(_FAKE_CREDENTIALS).decode()
    registry_entry = dict(auth=encoded_credentials)
    registries = {_FAKE_REGISTRY: registry_entry}
    document = dict(auths=registries)
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {"name": name, "namespace": namespace},
        "data": {
            PULLSECRET_DATA_KEY: json.dumps(document, separators=(",", ":")).encode()
        },
    }


def get_pull_secret(
    client: InMemoryClient, oacp: OpenshiftAssistedControlPlane
) -> bytes:
    """The pull secret referenced by a control plane's config."""
    ref = oacp.spec.config.pull_secret_ref
    if not ref or not ref.get("name"):
        raise ValueError("control plane does not reference a pull secret")
    secret = client.get("Secret", oacp.namespace, ref["name"])
    data = secret.get("data") or {}
    if PULLSECRET_DATA_KEY not in data:
        raise LookupError(f"pullsecret secret does not have key {PULLSECRET_DATA_KEY}")
    value = data[PULLSECRET_DATA_KEY]
    return value.encode() if isinstance(value, str) else bytes(value)