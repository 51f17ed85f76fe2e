"""
Process adapter — stdio sinks and the install process runner.

``run_process`` is the SINGLE PLACE where installer subprocesses are
spawned.  Output is streamed line by line into a sink so a status
surface can show progress while the command runs.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import threading
import time
from collections import deque
from pathlib import Path

from lsp_installer.adapters.base import StdioSink

logger = logging.getLogger(__name__)


class SimpleSink:
    """Writes output straight to this process's stdout/stderr."""

    def stdout(self, chunk: str) -> None:
        sys.stdout.write(chunk)
        sys.stdout.flush()

    def stderr(self, chunk: str) -> None:
        sys.stderr.write(chunk)
        sys.stderr.flush()


class CaptureSink:
    """Keeps the last ``max_lines`` lines of output in memory.

    Writes may come from worker threads; reads from the owning context.
    """

    def __init__(self, max_lines: int = 200) -> None:
        self._lock = threading.Lock()
        self._lines: deque[str] = deque(maxlen=max_lines)

    def stdout(self, chunk: str) -> None:
        self._append(chunk)

    def stderr(self, chunk: str) -> None:
        self._append(chunk)

    def _append(self, chunk: str) -> None:
        with self._lock:
            self._lines.extend(line for line in chunk.splitlines() if line)

    @property
    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def tail(self, n: int = 1) -> list[str]:
        return self.lines[-n:]


def simple_sink() -> SimpleSink:
    return SimpleSink()


def capture_sink(max_lines: int = 200) -> CaptureSink:
    return CaptureSink(max_lines=max_lines)


def run_process(
    cmd: list[str],
    sink: StdioSink,
    *,
    cwd: Path | None = None,
    env_overrides: dict[str, str] | None = None,
    timeout: float | None = None,
) -> bool:
    """Run ``cmd`` to completion, streaming its output into ``sink``.

    Args:
        cmd: Argv list (never run through a shell).
        sink: Receives stdout and stderr.
        cwd: Working directory.
        env_overrides: Extra environment variables.
        timeout: Seconds before the process is killed.

    Returns:
        True if the command exited with status 0.
    """
    env = os.environ.copy()
    if env_overrides:
        env.update(env_overrides)

    logger.debug("Spawning: %s (cwd=%s)", cmd, cwd)
    start = time.monotonic()

    try:
        proc = subprocess.Popen(
            cmd,
            cwd=cwd,
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
        )
    except OSError as e:
        logger.error("Failed to spawn %s: %s", cmd[0] if cmd else "?", e)
        sink.stderr(f"{e}\n")
        return False

    pumps = [
        threading.Thread(target=_pump, args=(proc.stdout, sink.stdout), daemon=True),
        threading.Thread(target=_pump, args=(proc.stderr, sink.stderr), daemon=True),
    ]
    for pump in pumps:
        pump.start()

    try:
        returncode = proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        proc.kill()
        proc.wait()
        sink.stderr(f"Command timed out ({timeout}s)\n")
        logger.warning("Command timed out after %ss: %s", timeout, cmd)
        return False
    finally:
        for pump in pumps:
            pump.join()

    elapsed_ms = int((time.monotonic() - start) * 1000)
    logger.debug("Exited %d after %dms: %s", returncode, elapsed_ms, cmd)
    return returncode == 0


def _pump(stream, write) -> None:
    """Copy ``stream`` into ``write`` until EOF.

    Keeps reading when the sink raises; a pipe left undrained would block
    the child once its buffer fills.
    """
    try:
        for line in iter(stream.readline, ""):
            try:
                write(line)
            except Exception:
                logger.exception("Output sink failed, dropping line")
    except (OSError, ValueError) as e:
        logger.warning("Stopped reading process output: %s", e)
    finally:
        stream.close()
