import logging
import posixpath
import stat
from pathlib import Path

import paramiko

from ..domain.contracts.config import ResultServerConfig
from ..domain.contracts.remote import RemoteArchiveContract
from ..domain.errors import BenchLabError

logger = logging.getLogger(__name__)


class SftpArchiveError(BenchLabError):
    pass


class SftpArchive(RemoteArchiveContract):
    """Remote results archive reached over SFTP with paramiko."""

    def __init__(self, server: ResultServerConfig) -> None:
        self._server = server
        self._ssh: paramiko.SSHClient | None = None
        self._sftp: paramiko.SFTPClient | None = None

    @property
    def sftp(self) -> paramiko.SFTPClient:
        if self._sftp is None:
            raise SftpArchiveError("SFTP session is not connected")
        return self._sftp

    def connect(self) -> None:
        ssh = paramiko.SSHClient()
        ssh.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        ssh.load_system_host_keys()
        logger.debug(
            "Connecting to %s@%s:%s",
            self._server.username,
            self._server.host,
            self._server.port,
        )
        try:
            ssh.connect(
                self._server.host,
                port=self._server.port,
                username=self._server.username,
                password=self._server.password,
            )
            self._sftp = ssh.open_sftp()
        except Exception:
            ssh.close()
            raise
        self._ssh = ssh

    def close(self) -> None:
        sftp, ssh = self._sftp, self._ssh
        self._sftp = None
        self._ssh = None
        try:
            if sftp is not None:
                sftp.close()
        finally:
            if ssh is not None:
                ssh.close()

    def exists(self, remote_path: str) -> bool:
        try:
            self.sftp.stat(remote_path)
        except FileNotFoundError:
            return False
        return True

    def makedirs(self, remote_path: str) -> None:
        current = "/" if remote_path.startswith("/") else ""
        for part in remote_path.strip("/").split("/"):
            current = posixpath.join(current, part) if current else part
            if not self.exists(current):
                self.sftp.mkdir(current)

    def list_files(self, remote_dir: str) -> list[str]:
        return sorted(
            entry.filename
            for entry in self.sftp.listdir_attr(remote_dir)
            if entry.st_mode is not None and stat.S_ISREG(entry.st_mode)
        )

    def download(self, remote_path: str, local_path: Path) -> None:
        self.sftp.get(remote_path, str(local_path))

    def upload(self, local_path: Path, remote_path: str) -> None:
        self.sftp.put(str(local_path), remote_path)
