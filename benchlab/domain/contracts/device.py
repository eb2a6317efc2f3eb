from abc import ABC, abstractmethod
from typing import Any

DeviceInfo = dict[str, Any]


class DeviceInfoProviderContract(ABC):
    @abstractmethod
    async def get_device_info(self) -> DeviceInfo:
        pass
