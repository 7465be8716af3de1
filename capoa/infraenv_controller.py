"""Propagates InfraEnv ISO download URLs to the bootstrap configs that reference them."""

from __future__ import annotations

import dataclasses
import logging
import os
from typing import Any, Mapping
from urllib.parse import urlsplit, urlunsplit

from capoa.agent_controller import RETRY_AFTER
from capoa.bootstrap_api import OpenshiftAssistedConfig
from capoa.config import ServiceConfig
from capoa.kubeclient import InMemoryClient, NotFoundError, ReconcileResult

OAC_INFRA_ENV_REF_FIELD_NAME = ".status.infraEnvRef.name"
OAC_INFRA_ENV_REF_FIELD_NAMESPACE = ".status.infraEnvRef.namespace"

_log = logging.getLogger(__name__)


def filter_ref_name(obj: Any) -> list[str]:
    """Index values: the name of the InfraEnv a config references."""
    if not isinstance(obj, OpenshiftAssistedConfig) or obj.status.infra_env_ref is None:
        return []
    return [obj.status.infra_env_ref.get("name", "")]


def filter_ref_namespace(obj: Any) -> list[str]:
    """Index values: the namespace of the InfraEnv a config references."""
    if not isinstance(obj, OpenshiftAssistedConfig) or obj.status.infra_env_ref is None:
        return []
    return [obj.status.infra_env_ref.get("namespace", "")]


class InfraEnvReconciler:
    """Copies an InfraEnv's ISO URL into every OpenshiftAssistedConfig referencing it."""

    def __init__(
        self,
        client: InMemoryClient,
        config: ServiceConfig | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.client = client
        self.config = dataclasses.replace(config) if config else ServiceConfig()
        self._environ = os.environ if environ is None else environ

    def reconcile(self, namespace: str, name: str) -> ReconcileResult:
        try:
            infra_env = self.client.get("InfraEnv", namespace, name)
        except NotFoundError:
            return ReconcileResult()

        iso_url = (infra_env.get("status") or {}).get("isoDownloadURL", "")
        if not iso_url:
            _log.debug("image URL not available yet for %s/%s", namespace, name)
            return ReconcileResult(requeue=True, requeue_after=RETRY_AFTER)

        self._attach_iso(namespace, name, iso_url)
        return ReconcileResult()

    def _attach_iso(self, namespace: str, name: str, iso_url: str) -> None:
        referencing = []
        for raw in self.client.list(OpenshiftAssistedConfig.kind):
            typed = isinstance(raw, OpenshiftAssistedConfig)
            config = raw if typed else OpenshiftAssistedConfig.from_dict(raw)
            if filter_ref_name(config) == [name] and filter_ref_namespace(config) == [namespace]:
                referencing.append((config, typed))

        download_url = self._iso_url(iso_url)
        for config, typed in referencing:
            config.status.iso_download_url = download_url
            try:
                self.client.update_status(config if typed else config.to_dict())
            except NotFoundError as exc:
                raise RuntimeError(f"failed to update openshiftassistedconfig: {exc}") from exc
            _log.debug("set ISO URL on openshiftassistedconfig %s", config.name)

    def _iso_url(self, original: str) -> str:
        if not self.config.use_internal_image_url:
            return original

        if not self.config.image_service_namespace:
            # Without an override, the image service is assumed to share our namespace.
            own_namespace = self._environ.get("NAMESPACE")
            if own_namespace is None:
                raise LookupError(
                    "unable to determine internal ip of assisted-image-service: "
                    "no namespace provided for assisted-image-service service"
                )
            self.config.image_service_namespace = own_namespace

        try:
            service = self.client.get(
                "Service", self.config.image_service_namespace, self.config.image_service_name
            )
        except NotFoundError as exc:
            raise LookupError(f"failed to find assisted image service service: {exc}") from exc

        spec = service.get("spec") or {}
        cluster_ip = spec.get("clusterIP", "")
        ports = spec.get("ports") or []
        if not cluster_ip or not ports:
            raise ValueError(
                "failed to get internal image service URL, "
                "either cluster IP or Ports were missing from Service"
            )

        try:
            parts = urlsplit(original)
        except ValueError as exc:
            raise ValueError(
                f"failed to parse InfraEnv ISO download URL {original}: {exc}"
            ) from exc
        userinfo = parts.netloc.rpartition("@")[0]
        host = f"{cluster_ip}:{ports[0].get('port', 0)}"
        netloc = f"{userinfo}@{host}" if userinfo else host
        return urlunsplit(("http", netloc, parts.path, parts.query, parts.fragment))