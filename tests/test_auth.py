import base64
import json

import pytest

from capoa.auth import generate_fake_pull_secret, get_pull_secret
from capoa.controlplane_api import (
    OpenshiftAssistedControlPlane,
    OpenshiftAssistedControlPlaneConfigSpec,
    OpenshiftAssistedControlPlaneSpec,
)
from capoa.kubeclient import InMemoryClient, NotFoundError

PULL_SECRET_NAME = "test-pull-secret"
NAMESPACE = "test-namespace"


def _control_plane(ref):
    return OpenshiftAssistedControlPlane(
        metadata={"name": "test-oacp", "namespace": NAMESPACE},
        spec=OpenshiftAssistedControlPlaneSpec(
            config=OpenshiftAssistedControlPlaneConfigSpec(pull_secret_ref=ref)
        ),
    )


def test_generate_fake_pull_secret_has_docker_config_key():
    secret = generate_fake_pull_secret(PULL_SECRET_NAME, NAMESPACE)
    assert ".dockerconfigjson" in secret["data"]
    assert secret["metadata"] == {"name": PULL_SECRET_NAME, "namespace": NAMESPACE}
    assert secret["kind"] == "Secret"


def test_fake_pull_secret_document_shape():
    secret = generate_fake_pull_secret(PULL_SECRET_NAME, NAMESPACE)
    document = json.loads(secret["data"][".dockerconfigjson"])
    auth = document["auths"]["fake-pull-secret"]["auth"]
    user, _, rest = base64.b64decode(auth).partition(b":")
    assert user == b"placeholder"
    assert rest.strip() == b"secret"


def test_get_pull_secret_round_trip():
    client = InMemoryClient([generate_fake_pull_secret(PULL_SECRET_NAME, NAMESPACE)])
    value = get_pull_secret(client, _control_plane({"name": PULL_SECRET_NAME}))
    assert "fake-pull-secret" in json.loads(value)["auths"]


def test_get_pull_secret_missing_key():
    client = InMemoryClient(
        [
            {
                "apiVersion": "v1",
                "kind": "Secret",
                "metadata": {"name": PULL_SECRET_NAME, "namespace": NAMESPACE},
                "data": {"other": b"x"},
            }
        ]
    )
    with pytest.raises(LookupError) as info:
        get_pull_secret(client, _control_plane({"name": PULL_SECRET_NAME}))
    assert str(info.value) == "pullsecret secret does not have key .dockerconfigjson"


def test_get_pull_secret_missing_secret():
    with pytest.raises(NotFoundError):
        get_pull_secret(InMemoryClient(), _control_plane({"name": PULL_SECRET_NAME}))


def test_get_pull_secret_without_reference():
    with pytest.raises(ValueError):
        get_pull_secret(InMemoryClient(), _control_plane(None))