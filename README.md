# capoa

Building blocks for provisioning OpenShift clusters through the assisted
installer, in the Cluster API bootstrap and control-plane style: resource
types, an in-memory object store, Ignition override generation, pull-secret
helpers, and reconcilers for Agents and InfraEnvs.

## Modules

- `capoa.config` – `ServiceConfig`, the service settings. `ServiceConfig.from_env()`
  reads `USE_INTERNAL_IMAGE_URL`, `IMAGE_SERVICE_NAME`, `IMAGE_SERVICE_NAMESPACE`,
  `ASSISTED_SERVICE_NAME`, `ASSISTED_INSTALLER_NAMESPACE`,
  `ASSISTED_CA_BUNDLE_NAMESPACE`, `ASSISTED_CA_BUNDLE_NAME` and
  `ASSISTED_CA_BUNDLE_KEY` (default `ca-bundle.crt`) from `os.environ` or a
  mapping you pass; an unparsable boolean raises `ValueError`.
- `capoa.kubeclient` – `InMemoryClient`, an object store keyed by kind,
  namespace and name, with `get`, `list` (filtered by namespace and labels),
  `create`, `update` (keeps the stored status), `update_status` (replaces only
  the status) and `delete`. It holds manifest dicts or the typed resources
  below, and always hands out copies. Missing objects raise `NotFoundError`,
  duplicates `AlreadyExistsError`. Also here: `ObjectKey`, `ReconcileResult`
  (`requeue`, `requeue_after` in seconds) and `get_assisted_http_client`, which
  returns a `urllib.request` opener – a plain one when no CA bundle is
  configured, otherwise one whose TLS context trusts the PEM bundle read from
  the configured ConfigMap key.
- `capoa.bootstrap_api` – `OpenshiftAssistedConfig` (with its spec, status and
  `NodeRegistrationOptions`) and `OpenshiftAssistedConfigTemplate`, each with
  `to_dict` / `from_dict`, plus the group/version and condition/reason constants.
- `capoa.controlplane_api` – `OpenshiftAssistedControlPlane` with its spec,
  status, config spec, machine template and `Capabilities`, with `to_dict` /
  `from_dict`. At most two API and two ingress VIPs are accepted.
- `capoa.ignition` – `create_ignition_file` and
  `get_ignition_config_overrides`, which return Ignition 3.1.0 JSON holding the
  given files, a config-drive metadata script and two systemd units.
- `capoa.auth` – `generate_fake_pull_secret(name, namespace)`, a placeholder
  Secret under the `.dockerconfigjson` key, and `get_pull_secret(client, oacp)`,
  which reads the Secret a control plane references.
- `capoa.agent_controller` – `AgentReconciler(client)`. `reconcile(namespace, name)`
  finds the Agent's InfraEnv (via its `infraenvs.agent-install.openshift.io`
  label), the Machine owning that InfraEnv and the Machine's bootstrap config;
  it records the Agent in the config's status if none is set, then sets the
  Agent's role (`master` for control-plane machines, otherwise `worker`), its
  Ignition overrides (`get_ignition_config`) and approves it.
- `capoa.infraenv_controller` – `InfraEnvReconciler(client, config=None, environ=None)`.
  `reconcile(namespace, name)` copies the InfraEnv's ISO download URL into
  every `OpenshiftAssistedConfig` whose status references it. With
  `use_internal_image_url` set, the URL is rewritten to `http://<clusterIP>:<port>`
  of the image service Service. Without an ISO URL it asks to be requeued after
  20 seconds. `filter_ref_name` / `filter_ref_namespace` give the referenced
  InfraEnv's name and namespace.

## Example

```python
from capoa.bootstrap_api import OpenshiftAssistedConfig, OpenshiftAssistedConfigStatus
from capoa.infraenv_controller import InfraEnvReconciler
from capoa.kubeclient import InMemoryClient

client = InMemoryClient([
    {
        "apiVersion": "agent-install.openshift.io/v1beta1",
        "kind": "InfraEnv",
        "metadata": {"name": "worker-0", "namespace": "test-namespace"},
        "status": {"isoDownloadURL": "https://example.com/my-image"},
    },
    OpenshiftAssistedConfig(
        metadata={"name": "worker-0-config", "namespace": "test-namespace"},
        status=OpenshiftAssistedConfigStatus(
            infra_env_ref={"name": "worker-0", "namespace": "test-namespace"}
        ),
    ),
])

InfraEnvReconciler(client).reconcile("test-namespace", "worker-0")
config = client.get("OpenshiftAssistedConfig", "test-namespace", "worker-0-config")
print(config.status.iso_download_url)  # https://example.com/my-image
```

```python
from capoa.ignition import create_ignition_file, get_ignition_config_overrides

done = create_ignition_file(
    "/run/cluster-api/bootstrap-success.complete",
    "root",
    "data:text/plain;charset=utf-8;base64,c3VjY2Vzcw==",
    420,
    True,
)
print(get_ignition_config_overrides(done))
```

## What it does not do

- There is no command or long-running manager: reconcilers are called
  directly, one object at a time, and nothing watches for changes.
- There is no connection to a real Kubernetes API server; `InMemoryClient` is
  the only store.
- There is no reconciler for `OpenshiftAssistedConfig` itself (creating
  InfraEnvs, fetching Ignition, writing user-data Secrets) or for
  `OpenshiftAssistedControlPlane`; only their types are provided.

## Tests

```
pip install -e ".[test]"
pytest
```