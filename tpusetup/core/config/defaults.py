"""Default configuration values.

Split out from `tpusetup.core.config` so the step definitions and the tests can
import them without building a Config.
"""

from __future__ import annotations

JAX_RELEASES_URL = "https://storage.googleapis.com/jax-releases/libtpu_releases.html"

DEFAULT_PACKAGES: list = [
    "jupyter",
    "notebook",
    {"name": "jax[tpu]", "find_links": JAX_RELEASES_URL},
    "torch",
    "torch_xla",
    "tensorflow",
    "flax",
    "optax",
    "tensorboard",
    "ipykernel",
]

DEFAULTS: dict = {
    "python_version": "3.10",
    # Relative paths resolve against the working directory, like the shell scripts did.
    "log_file": "setup_log.txt",
    "venv_dir": "~/tpu_env",
    # None -> pick ~/.bashrc / ~/.zshrc / ~/.profile from $SHELL.
    "profile_file": None,
    "kernel_name": "tpu_kernel",
    # None -> "Python <python_version> (TPU)".
    "kernel_display_name": None,
    # Network-bound steps (index refresh, downloads).
    "retry_attempts": 3,
    "retry_backoff_s": 5.0,
    # Applied to every entry of "packages" independently.
    "package_retry_attempts": 3,
    # Ignored when already running as root.
    "use_sudo": True,
    "python_repository": "ppa:deadsnakes/ppa",
    "tpu_runtime_package": "libtpu1",
    "tpu_key_url": "https://packages.cloud.google.com/apt/doc/apt-key.gpg",
    "tpu_keyring": "/usr/share/keyrings/cloud.google.gpg",
    "tpu_source_list": "/etc/apt/sources.list.d/google-cloud.list",
    "tpu_source_line": (
        "deb [signed-by=/usr/share/keyrings/cloud.google.gpg] "
        "https://packages.cloud.google.com/apt cloud-sdk main"
    ),
    "libtpu_fallback_package": "libtpu",
    "libtpu_find_links": JAX_RELEASES_URL,
    "packages": DEFAULT_PACKAGES,
    # Values may use {venv_dir} and {python_version}; $VARS are left for the shell.
    "profile_exports": {
        "PATH": "$HOME/.local/bin:{venv_dir}/bin:$PATH",
        "LD_LIBRARY_PATH": "{venv_dir}/lib:$LD_LIBRARY_PATH",
        "PYTHONPATH": "$HOME/.local/lib/python{python_version}/site-packages:$PYTHONPATH",
    },
}
