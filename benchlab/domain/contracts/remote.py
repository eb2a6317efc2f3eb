import logging
from abc import ABC, abstractmethod
from pathlib import Path
from types import TracebackType
from typing import Protocol

from .config import ResultServerConfig

logger = logging.getLogger(__name__)


class RemoteArchiveContract(ABC):
    """One connected session against the remote results archive.

    Used as a context manager: entering connects, leaving always closes.
    """

    @abstractmethod
    def connect(self) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    @abstractmethod
    def exists(self, remote_path: str) -> bool:
        pass

    @abstractmethod
    def makedirs(self, remote_path: str) -> None:
        pass

    @abstractmethod
    def list_files(self, remote_dir: str) -> list[str]:
        pass

    @abstractmethod
    def download(self, remote_path: str, local_path: Path) -> None:
        pass

    @abstractmethod
    def upload(self, local_path: Path, remote_path: str) -> None:
        pass

    def __enter__(self) -> "RemoteArchiveContract":
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        # A failing close must not replace the error raised inside the block.
        try:
            self.close()
        except Exception as e:
            logger.warning("Failed to close remote session: %s", e)


class RemoteArchiveFactory(Protocol):
    def __call__(self, server: ResultServerConfig) -> RemoteArchiveContract: ...
