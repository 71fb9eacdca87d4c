"""SSH service for building ssh commands and running the attempt sequence."""

from __future__ import annotations
import os
import subprocess
import logging
from pathlib import Path
from typing import Callable, List, Optional

from ssh_launch.exceptions import ConnectionFailed, NoKeysAvailable, SSHClientMissing
from ssh_launch.services.connection_resolver import (
    ConnectionAttempt,
    EffectiveParams,
    next_attempt,
)
from ssh_launch.services.interfaces import SSHServiceInterface

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


class SSHService(SSHServiceInterface):
    """Invokes the external ssh client, one process per attempt.

    The agent attempt runs first; each identity candidate is then tried in
    isolation with IdentitiesOnly=yes until one exits with status 0.
    """

    def __init__(self, ssh_binary: str = 'ssh', runner: Optional[Runner] = None) -> None:
        """Initialize SSH service.

        Args:
            ssh_binary: Name or path of the ssh client.
            runner: Callable used to run commands (default: subprocess.run).
        """
        self._ssh_binary = ssh_binary
        self._runner = runner or subprocess.run

    def build_ssh_command(
        self,
        params: EffectiveParams,
        attempt: ConnectionAttempt,
        known_hosts_file: Optional[Path] = None,
    ) -> List[str]:
        """Build SSH command as List[str]. NEVER use shell=True.

        Args:
            params: Resolved connection parameters.
            attempt: Attempt to build the command for.
            known_hosts_file: Consolidated known_hosts file to use.

        Returns:
            List of command arguments for subprocess.
        """
        cmd = [self._ssh_binary, '-p', str(params.port)]

        if known_hosts_file:
            cmd.extend(['-o', f'UserKnownHostsFile={known_hosts_file}'])

        if not attempt.uses_agent:
            cmd.extend(['-o', 'IdentitiesOnly=yes', '-i', attempt.identity])

        if params.post_connect_command:
            cmd.append('-t')

        cmd.append(params.destination)

        if params.post_connect_command:
            cmd.append(params.post_connect_command)

        logger.debug("Built SSH command: %s", ' '.join(cmd))
        return cmd

    def connect(
        self,
        params: EffectiveParams,
        known_hosts_file: Optional[Path] = None,
        on_attempt: Optional[Callable[[ConnectionAttempt], None]] = None,
    ) -> ConnectionAttempt:
        """Run the attempt sequence until one attempt succeeds.

        Args:
            params: Resolved connection parameters.
            known_hosts_file: Consolidated known_hosts file to use.
            on_attempt: Called before each attempt, e.g. to print progress.

        Returns:
            The attempt that succeeded.

        Raises:
            NoKeysAvailable: The agent attempt failed and there are no keys.
            ConnectionFailed: Every attempt failed.
            SSHClientMissing: The ssh client could not be executed.
        """
        attempts = 0
        attempt = next_attempt(params)
        while attempt is not None:
            if on_attempt:
                on_attempt(attempt)
            attempts += 1
            status = self._run(params, attempt, known_hosts_file)
            if status == 0:
                logger.info("Connected to %s using %s", params.alias, attempt)
                return attempt
            logger.info(
                "Attempt %d for %s using %s exited with status %d",
                attempts, params.alias, attempt, status
            )
            attempt = next_attempt(params, attempt, status)

        if not params.has_identities:
            raise NoKeysAvailable(params.alias, list(params.searched_directories))
        raise ConnectionFailed(params.alias, attempts)

    def _run(
        self,
        params: EffectiveParams,
        attempt: ConnectionAttempt,
        known_hosts_file: Optional[Path],
    ) -> int:
        cmd = self.build_ssh_command(params, attempt, known_hosts_file)
        cwd = params.working_directory or None
        if cwd and not os.path.isdir(cwd):
            logger.warning("Working directory does not exist: %s", cwd)
            cwd = None
        try:
            result = self._runner(cmd, cwd=cwd)
        except FileNotFoundError:
            raise SSHClientMissing(self._ssh_binary)
        return result.returncode
