from .config import ConfigLoaderContract
from .device import DeviceInfoProviderContract
from .executor import ExecutorContract
from .remote import RemoteArchiveContract
from .results import ResultRepositoryContract

__all__ = [
    "ConfigLoaderContract",
    "DeviceInfoProviderContract",
    "ExecutorContract",
    "RemoteArchiveContract",
    "ResultRepositoryContract",
]
