"""Approves assisted-installer Agents booted for Cluster API machines."""

from __future__ import annotations

import base64
import logging
from typing import Any, Mapping

from capoa.bootstrap_api import OpenshiftAssistedConfig
from capoa.ignition import create_ignition_file, get_ignition_config_overrides
from capoa.kubeclient import InMemoryClient, NotFoundError, ReconcileResult

RETRY_AFTER = 20.0
METAL3_PROVIDER_ID_LABEL_KEY = "metal3.io/uuid"
INFRA_ENV_NAME_LABEL = "infraenvs.agent-install.openshift.io"
MACHINE_CONTROL_PLANE_LABEL = "cluster.x-k8s.io/control-plane"
HOST_ROLE_WORKER = "worker"
HOST_ROLE_MASTER = "master"

_CLUSTER_API_GROUP = "cluster.x-k8s.io"
_DATA_PREFIX = "data:text/plain;charset=utf-8;base64,"

_log = logging.getLogger(__name__)


def get_ignition_config(config: OpenshiftAssistedConfig) -> str:
    """Ignition overrides marking bootstrap success and setting extra kubelet labels."""
    success_file = create_ignition_file(
        "/run/cluster-api/bootstrap-success.complete",
        "root",
        _DATA_PREFIX + "c3VjY2Vzcw==",
        420,
        True,
    )
    extra_labels = ",".join(config.spec.node_registration.kubelet_extra_labels)
    script = (
        "#!/bin/bash\n"
        f'echo "CUSTOM_KUBELET_LABELS={extra_labels}" '
        "| tee -a /etc/kubernetes/kubelet-env >/dev/null\n"
    )
    labels_file = create_ignition_file(
        "/usr/local/bin/kubelet_custom_labels",
        "root",
        _DATA_PREFIX + base64.b64encode(script.encode()).decode(),
        493,
        True,
    )
    return get_ignition_config_overrides(success_file, labels_file)


def _metadata(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    return obj.get("metadata") or {}


class AgentReconciler:
    """Links Agents to their bootstrap config and approves them with the machine's role."""

    def __init__(self, client: InMemoryClient):
        self.client = client

    def reconcile(self, namespace: str, name: str) -> ReconcileResult:
        try:
            agent = self.client.get("Agent", namespace, name)
        except NotFoundError:
            return ReconcileResult()

        machine = self._machine_for_agent(agent)
        config_ref = ((machine.get("spec") or {}).get("bootstrap") or {}).get("configRef")
        if not config_ref:
            _log.debug("agent %s/%s doesn't belong to a CAPI cluster", namespace, name)
            return ReconcileResult()

        config = self._ensure_bootstrap_config_reference(config_ref, name)
        self._set_agent_fields(agent, machine, config)
        return ReconcileResult()

    def _set_agent_fields(
        self,
        agent: dict[str, Any],
        machine: Mapping[str, Any],
        config: OpenshiftAssistedConfig,
    ) -> None:
        labels = _metadata(machine).get("labels") or {}
        role = HOST_ROLE_MASTER if MACHINE_CONTROL_PLANE_LABEL in labels else HOST_ROLE_WORKER
        spec = agent.setdefault("spec", {})
        spec["role"] = role
        spec["ignitionConfigOverrides"] = get_ignition_config(config)
        spec["approved"] = True
        self.client.update(agent)

    def _ensure_bootstrap_config_reference(
        self, config_ref: Mapping[str, Any], agent_name: str
    ) -> OpenshiftAssistedConfig:
        raw = self.client.get(
            OpenshiftAssistedConfig.kind,
            config_ref.get("namespace", ""),
            config_ref.get("name", ""),
        )
        typed = isinstance(raw, OpenshiftAssistedConfig)
        config = raw if typed else OpenshiftAssistedConfig.from_dict(raw)
        if config.status.agent_ref is None:
            config.status.agent_ref = {"name": agent_name}
            self.client.update_status(config if typed else config.to_dict())
        return config

    def _machine_for_agent(self, agent: Mapping[str, Any]) -> dict[str, Any]:
        metadata = _metadata(agent)
        namespace = metadata.get("namespace", "")
        infra_env_name = (metadata.get("labels") or {}).get(INFRA_ENV_NAME_LABEL)
        if infra_env_name is None:
            raise ValueError(
                f"no {INFRA_ENV_NAME_LABEL} label on Agent "
                f"{namespace}/{metadata.get('name', '')}"
            )
        infra_env = self.client.get("InfraEnv", namespace, infra_env_name)
        return self._machine_owner(infra_env)

    def _machine_owner(self, infra_env: Mapping[str, Any]) -> dict[str, Any]:
        metadata = _metadata(infra_env)
        namespace = metadata.get("namespace", "")
        for ref in metadata.get("ownerReferences") or []:
            group = (ref.get("apiVersion") or "").rpartition("/")[0]
            if ref.get("kind") == "Machine" and group == _CLUSTER_API_GROUP:
                return self.client.get("Machine", namespace, ref.get("name", ""))
        raise LookupError(
            f"couldn't find Machine owner for InfraEnv {namespace}/{metadata.get('name', '')}"
        )