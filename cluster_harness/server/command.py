"""
Process-backed index server runtime.

Launches the server binary with a node's configuration and blocks until the
node accepts connections on its bind address.
"""
import os
import time
import shutil
import logging
import subprocess
from typing import List, Optional
from ..errors import ServerRunError, ServerCloseError
from ..interfaces import IServerRuntime
from ..models import HarnessConfig, NodeConfig
from ..utils.net_utils import is_port_open

logger = logging.getLogger(__name__)


class ServerCommand(IServerRuntime):
    """
    One index server process.

    `stdin`, `stdout` and `stderr` accept anything `subprocess.Popen` accepts;
    output is discarded unless a sink is given or `log_dir` is configured.
    """

    def __init__(self, config: NodeConfig, stdin=None, stdout=None, stderr=None,
                 harness_config: Optional[HarnessConfig] = None):
        self.config = config
        self.harness_config = harness_config or HarnessConfig()
        self.stdin = subprocess.DEVNULL if stdin is None else stdin
        self.stdout = stdout
        self.stderr = stderr
        self.process: Optional[subprocess.Popen] = None
        self.log_file: Optional[str] = None
        self._log_handle = None

    @property
    def pid(self) -> Optional[int]:
        return self.process.pid if self.process else None

    def build_command(self) -> List[str]:
        """
        Build the server command line from the node configuration.

        This is the single source of truth for node startup flags.
        """
        return [
            self.harness_config.server_binary,
            'server',
            '--bind', self.config.bind,
            '--data-dir', self.config.data_dir,
            '--gossip.port', self.config.gossip_port,
            '--gossip.seed', self.config.gossip_seed,
            '--cluster.type', self.config.cluster.type,
            '--cluster.hosts', ','.join(self.config.cluster.hosts),
        ]

    def _open_output(self):
        if self.stdout is not None or self.harness_config.log_dir is None:
            stdout = subprocess.DEVNULL if self.stdout is None else self.stdout
            stderr = subprocess.DEVNULL if self.stderr is None else self.stderr
            return stdout, stderr

        os.makedirs(self.harness_config.log_dir, exist_ok=True)
        self.log_file = os.path.join(self.harness_config.log_dir, f"node-{self.config.port}.log")
        self._log_handle = open(self.log_file, 'ab')
        stderr = subprocess.STDOUT if self.stderr is None else self.stderr
        return self._log_handle, stderr

    def _close_output(self) -> None:
        if self._log_handle is not None:
            self._log_handle.close()
            self._log_handle = None

    def run(self) -> None:
        """Spawn the server and wait until its bind port accepts connections"""
        if self.process is not None:
            raise ServerRunError(f"server on {self.config.bind} already started")

        host, port = self.config.host, self.config.port
        if is_port_open(host, port):
            raise ServerRunError(f"bind address {self.config.bind} already in use")

        cmd = self.build_command()
        stdout, stderr = self._open_output()

        logger.info(f"Spawning server on {self.config.bind}")
        try:
            self.process = subprocess.Popen(cmd, stdin=self.stdin, stdout=stdout, stderr=stderr)
        except OSError as e:
            self._close_output()
            raise ServerRunError(f"launching {cmd[0]}", e) from e

        timeout = self.harness_config.startup_timeout
        deadline = time.time() + timeout

        while time.time() < deadline:
            if self.process.poll() is not None:
                raise ServerRunError(
                    f"server on {self.config.bind} exited with code {self.process.returncode} before becoming ready"
                )

            if is_port_open(host, port):
                logger.info(f"Server on {self.config.bind} is ready (PID {self.process.pid})")
                return

            time.sleep(0.1)

        self._terminate()
        raise ServerRunError(f"server on {self.config.bind} not ready within {timeout:.2f}s")

    def _terminate(self) -> None:
        if self.process is None or self.process.poll() is not None:
            return

        logger.info(f"Terminating server on {self.config.bind} (PID {self.process.pid})")

        self.process.terminate()
        try:
            self.process.wait(timeout=self.harness_config.shutdown_timeout)
        except subprocess.TimeoutExpired:
            self.process.kill()
            self.process.wait()
        logger.info(f"Server on {self.config.bind} terminated")

    def close(self) -> None:
        """Stop the server, close its log file and remove its data directory"""
        try:
            self._terminate()
        except OSError as e:
            raise ServerCloseError(f"stopping server on {self.config.bind}", e) from e
        finally:
            self._close_output()

        if self.harness_config.enable_cleanup and os.path.exists(self.config.data_dir):
            try:
                shutil.rmtree(self.config.data_dir)
            except OSError as e:
                raise ServerCloseError(f"removing data dir {self.config.data_dir}", e) from e
            logger.info(f"Deleted data directory {self.config.data_dir}")
