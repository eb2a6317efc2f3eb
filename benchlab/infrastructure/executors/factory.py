from ...domain.contracts.executor import ExecutorContract
from ...domain.errors import ConfigurationError


def _build_registry() -> dict[str, type[ExecutorContract]]:
    from .command import CommandExecutor

    return {
        "Speedometer2": CommandExecutor,
        "WebXPRT3": CommandExecutor,
        "WebXPRT2015": CommandExecutor,
        "Unity3D": CommandExecutor,
        "JetStream2": CommandExecutor,
        "Aquarium": CommandExecutor,
        "BaseMark": CommandExecutor,
        "TensorFlow_Wasm": CommandExecutor,
        "TensorFlow_WebGL_ResNet": CommandExecutor,
        "TensorFlow_WebGPU_ResNet": CommandExecutor,
        "TensorFlow_WebGL_MobileNet": CommandExecutor,
        "TensorFlow_WebGPU_MobileNet": CommandExecutor,
    }


def known_workloads() -> frozenset[str]:
    return frozenset(_build_registry().keys())


def get_executor(workload_name: str) -> ExecutorContract:
    registry = _build_registry()

    if workload_name not in registry:
        raise ConfigurationError(
            f"Unknown workload '{workload_name}'. "
            f"Available: {', '.join(registry.keys())}"
        )

    return registry[workload_name]()
