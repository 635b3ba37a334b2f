"""tpusetup: idempotent, retryable provisioning of a TPU machine."""

__version__ = "0.3.0"
