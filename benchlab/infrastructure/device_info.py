from pathlib import Path

import yaml

from ..domain.contracts.device import DeviceInfo, DeviceInfoProviderContract
from ..domain.errors import ConfigurationError


class DeviceInfoError(ConfigurationError):
    pass


def validate_device_info(device_info: DeviceInfo) -> DeviceInfo:
    cpu = device_info.get("CPU")
    if not isinstance(cpu, dict) or not cpu.get("mfr") or not cpu.get("info"):
        raise DeviceInfoError("Device info requires CPU.mfr and CPU.info")
    if not device_info.get("Browser"):
        raise DeviceInfoError("Device info requires Browser")
    return device_info


class FileDeviceInfoProvider(DeviceInfoProviderContract):
    """Reads device info probed ahead of time from a YAML or JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    async def get_device_info(self) -> DeviceInfo:
        if not self._path.exists():
            raise DeviceInfoError(f"Device info file not found: {self._path}")

        with open(self._path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise DeviceInfoError(f"Invalid device info in {self._path}: {e}")

        if not isinstance(data, dict):
            raise DeviceInfoError(
                f"Device info must be a dictionary, got {type(data).__name__}"
            )

        return validate_device_info(data)
