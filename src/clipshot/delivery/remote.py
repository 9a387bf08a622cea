"""Stream screenshots to another machine over ssh.

The image is written to the stdin of ``ssh <target> 'cat > file'``; nothing
touches local disk. The path reported back (and put on the clipboard) uses
a best-effort guess of the remote home directory, while the remote command
itself addresses ``~`` so a wrong guess never misplaces the file.
"""

import logging
import shlex
import subprocess
from typing import List, Optional

from clipshot.delivery.base import DeliverySink
from clipshot.models.delivery import DeliveryResult

logger = logging.getLogger(__name__)

MULTIPLEX_OPTIONS = (
    "-o", "ControlMaster=auto",
    "-o", "ControlPath=~/.ssh/clipshot-%r@%h:%p",
    "-o", "ControlPersist=60",
)


def home_for_user(user: str) -> str:
    return "/root" if user == "root" else f"/home/{user}"


def remote_home_hint(host_spec: str) -> Optional[str]:
    """Home directory implied by a ``user@host`` target, or None for a bare alias."""
    user, sep, _ = host_spec.partition("@")
    if not sep or not user:
        return None
    return home_for_user(user)


def parse_ssh_config_user(output: str) -> Optional[str]:
    for line in output.splitlines():
        key, _, value = line.strip().partition(" ")
        if key.lower() == "user" and value.strip():
            return value.strip()
    return None


class RemoteSink(DeliverySink):

    def __init__(
        self,
        host_spec: str,
        remote_dir: str = "clipshot-screenshots",
        ssh_command: str = "ssh",
        multiplex: bool = True,
        timeout: float = 5.0,
        resolve_timeout: float = 5.0,
    ) -> None:
        self.host_spec = host_spec
        self.remote_dir = remote_dir
        self.ssh_command = ssh_command
        self.multiplex = multiplex
        self.timeout = timeout
        self.resolve_timeout = resolve_timeout
        self._home_dir: Optional[str] = None

    def home_dir(self) -> str:
        if self._home_dir is None:
            self._home_dir = remote_home_hint(self.host_spec) or self._resolve_alias_home()
        return self._home_dir

    def _resolve_alias_home(self) -> str:
        # `ssh -G` evaluates ~/.ssh/config for the alias without connecting.
        try:
            result = subprocess.run(
                [self.ssh_command, "-G", self.host_spec],
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                check=True,
                timeout=self.resolve_timeout,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
            return "~"

        user = parse_ssh_config_user(result.stdout.decode("utf-8", errors="ignore"))
        return home_for_user(user) if user else "~"

    def build_command(self, filename: str) -> List[str]:
        directory = shlex.quote(self.remote_dir)
        target = f"~/{directory}/{shlex.quote(filename)}"
        command = [self.ssh_command]
        if self.multiplex:
            command.extend(MULTIPLEX_OPTIONS)
        command.extend(["-o", "BatchMode=yes", self.host_spec,
                        f"mkdir -p ~/{directory} && cat > {target}"])
        return command

    def deliver(self, payload: bytes, filename: str) -> DeliveryResult:
        remote_path = f"{self.home_dir()}/{self.remote_dir}/{filename}"

        try:
            proc = subprocess.Popen(
                self.build_command(filename),
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            return DeliveryResult(success=False, path=remote_path, error=str(e))

        try:
            _, stderr = proc.communicate(input=payload, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.communicate()
            return DeliveryResult(
                success=False,
                path=remote_path,
                error=f"transfer timed out after {self.timeout:g}s",
            )

        if proc.returncode == 0:
            return DeliveryResult(success=True, path=remote_path)

        message = (stderr or b"").decode("utf-8", errors="ignore").strip()
        return DeliveryResult(
            success=False,
            path=remote_path,
            error=message or f"ssh exited with status {proc.returncode}",
        )

    def describe(self) -> str:
        return self.host_spec
