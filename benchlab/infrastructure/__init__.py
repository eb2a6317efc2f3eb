from .device_info import FileDeviceInfoProvider
from .file_result_repository import FileResultRepository
from .sftp_archive import SftpArchive
from .yaml_config_loader import YamlConfigLoader

__all__ = [
    "FileDeviceInfoProvider",
    "FileResultRepository",
    "SftpArchive",
    "YamlConfigLoader",
]
