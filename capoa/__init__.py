"""Resource types, an in-memory object store, Ignition helpers and Agent/InfraEnv reconcilers for assisted-installer OpenShift clusters."""

__version__ = "0.1.0"