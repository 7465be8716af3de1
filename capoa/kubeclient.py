"""A small in-memory object store with Kubernetes client semantics."""

from __future__ import annotations

import copy
import ssl
import urllib.request
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from capoa.config import ServiceConfig

_KNOWN_GROUPS = {
    "ConfigMap": "",
    "Secret": "",
    "Service": "",
    "Namespace": "",
    "Agent": "agent-install.openshift.io",
    "InfraEnv": "agent-install.openshift.io",
    "Machine": "cluster.x-k8s.io",
    "Cluster": "cluster.x-k8s.io",
    "OpenshiftAssistedConfig": "bootstrap.cluster.x-k8s.io",
    "OpenshiftAssistedConfigTemplate": "bootstrap.cluster.x-k8s.io",
    "OpenshiftAssistedControlPlane": "controlplane.cluster.x-k8s.io",
    "ClusterDeployment": "hive.openshift.io",
    "AgentClusterInstall": "extensions.hive.openshift.io",
}


class NotFoundError(LookupError):
    """The requested object does not exist."""

    def __init__(self, resource: str, name: str):
        self.resource = resource
        self.name = name
        super().__init__(f'{resource} "{name}" not found')


class AlreadyExistsError(Exception):
    """An object with the same kind, namespace and name already exists."""

    def __init__(self, resource: str, name: str):
        self.resource = resource
        self.name = name
        super().__init__(f'{resource} "{name}" already exists')


@dataclass(frozen=True, order=True)
class ObjectKey:
    """Namespace and name of an object."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of one reconciliation; requeue_after is in seconds."""

    requeue: bool = False
    requeue_after: float = 0.0


def _pluralize(kind: str) -> str:
    lower = kind.lower()
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return lower + "es"
    if lower.endswith("y") and lower[-2:-1] not in "aeiou":
        return lower[:-1] + "ies"
    return lower + "s"


def _parts(obj: Any) -> tuple[str, str, Mapping[str, Any]]:
    if isinstance(obj, Mapping):
        return obj["kind"], obj.get("apiVersion", ""), obj.get("metadata") or {}
    return obj.kind, getattr(obj, "api_version", ""), obj.metadata or {}


def _status_of(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return obj.get("status")
    return getattr(obj, "status", None)


def _with_status_of(target: Any, source: Any) -> Any:
    """A copy of target that carries the status of source."""
    result = copy.deepcopy(target)
    status = copy.deepcopy(_status_of(source))
    if isinstance(result, dict):
        if status is None:
            result.pop("status", None)
        else:
            result["status"] = status
    elif hasattr(result, "status"):
        result.status = status
    return result


class InMemoryClient:
    """Stores objects by kind, namespace and name; hands out copies only.

    Objects are either manifest dicts (with "kind", "apiVersion", "metadata")
    or objects with kind, api_version and metadata attributes.
    """

    def __init__(self, objects: Iterable[Any] = ()):
        self._store: dict[tuple[str, str, str], Any] = {}
        self._groups = dict(_KNOWN_GROUPS)
        for obj in objects:
            self.create(obj)

    def _resource(self, kind: str) -> str:
        group = self._groups.get(kind, "")
        plural = _pluralize(kind)
        return f"{plural}.{group}" if group else plural

    def _key(self, obj: Any) -> tuple[str, str, str]:
        kind, api_version, metadata = _parts(obj)
        name = metadata.get("name") or ""
        if not name:
            raise ValueError(f"{self._resource(kind)}: resource name may not be empty")
        if "/" in api_version:
            self._groups[kind] = api_version.rpartition("/")[0]
        return kind, metadata.get("namespace") or "", name

    def get(self, kind: str, namespace: str, name: str) -> Any:
        try:
            return copy.deepcopy(self._store[(kind, namespace or "", name)])
        except KeyError:
            raise NotFoundError(self._resource(kind), name) from None

    def list(
        self,
        kind: str,
        namespace: str | None = None,
        labels: Mapping[str, str] | None = None,
    ) -> list[Any]:
        """Objects of a kind, optionally in one namespace and matching all labels."""
        selector = dict(labels or {})
        found = []
        for (obj_kind, obj_namespace, _), obj in sorted(
            self._store.items(), key=lambda item: item[0]
        ):
            if obj_kind != kind:
                continue
            if namespace is not None and obj_namespace != namespace:
                continue
            obj_labels = _parts(obj)[2].get("labels") or {}
            if all(obj_labels.get(key) == value for key, value in selector.items()):
                found.append(copy.deepcopy(obj))
        return found

    def create(self, obj: Any) -> None:
        key = self._key(obj)
        if key in self._store:
            raise AlreadyExistsError(self._resource(key[0]), key[2])
        self._store[key] = copy.deepcopy(obj)

    def update(self, obj: Any) -> None:
        """Replace an object; its stored status is kept."""
        key = self._key(obj)
        stored = self._existing(key)
        self._store[key] = _with_status_of(obj, stored)

    def update_status(self, obj: Any) -> None:
        """Replace only the status of an object."""
        key = self._key(obj)
        stored = self._existing(key)
        self._store[key] = _with_status_of(stored, obj)

    def delete(self, kind: str, namespace: str, name: str) -> None:
        key = (kind, namespace or "", name)
        self._existing(key)
        del self._store[key]

    def _existing(self, key: tuple[str, str, str]) -> Any:
        try:
            return self._store[key]
        except KeyError:
            raise NotFoundError(self._resource(key[0]), key[2]) from None


def get_assisted_http_client(
    config: ServiceConfig, client: InMemoryClient
) -> urllib.request.OpenerDirector:
    """An HTTP opener for the assisted-service, trusting its CA bundle if one is configured."""
    name = config.assisted_ca_bundle_name
    namespace = config.assisted_ca_bundle_namespace
    if not name and not namespace:
        return urllib.request.build_opener()
    if not name or not namespace:
        raise ValueError(
            "ASSISTED_CA_BUNDLE_NAME and ASSISTED_CA_BUNDLE_NAMESPACE "
            "must either both be set or unset"
        )

    config_map = client.get("ConfigMap", namespace, name)
    if isinstance(config_map, Mapping):
        data = config_map.get("data") or {}
    else:
        data = getattr(config_map, "data", None) or {}
    key = config.assisted_ca_bundle_key
    if key not in data:
        raise LookupError(
            f"key {key} not found in configmap {ObjectKey(namespace, name)}"
        )

    context = ssl.create_default_context()
    try:
        context.load_verify_locations(cadata=data[key])
    except (ssl.SSLError, ValueError) as exc:
        raise ValueError("failed to append additional certificates") from exc
    return urllib.request.build_opener(urllib.request.HTTPSHandler(context=context))