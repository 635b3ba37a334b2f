from __future__ import annotations

from ..core.config import Config
from ..core.model import Step, warn
from ..utils.subproc import ShellCommand

_JAX_DEVICES = "import jax; print('JAX devices:', jax.devices())"
_XLA_DEVICE = "import torch_xla.core.xla_model as xm; print('XLA device:', xm.xla_device())"


def steps(config: Config) -> list[Step]:
    """Read-only diagnostics; failures are reported but never undo the install."""

    py = str(config.venv_python)
    checks = [
        ("Verify Python", "interpreter version", ShellCommand.of(py, "--version")),
        ("Verify pip", "pip version", ShellCommand.of(py, "-m", "pip", "--version")),
        ("Verify JAX devices", "enumerate TPU devices through JAX", ShellCommand.of(py, "-c", _JAX_DEVICES)),
        ("Verify PyTorch/XLA device", "open the XLA device", ShellCommand.of(py, "-c", _XLA_DEVICE)),
    ]
    return [
        Step(number=0, name=name, description=description, command=command, policy=warn(), group="verify")
        for name, description, command in checks
    ]
