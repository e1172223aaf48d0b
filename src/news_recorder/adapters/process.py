"""Run external tools from an argument vector, never through a shell."""

import subprocess
from typing import List, Optional, Sequence

from news_recorder.errors import ProcessError


class ProcessRunner:
    """Blocking subprocess calls with a timeout; every failure becomes ProcessError."""

    def __init__(self, default_timeout: float = 120.0):
        self.default_timeout = default_timeout

    def run(
        self,
        argv: Sequence[str],
        input_bytes: Optional[bytes] = None,
        timeout: Optional[float] = None,
    ) -> bytes:
        """Run argv to completion and return its stdout."""
        args: List[str] = [str(a) for a in argv]
        if not args:
            raise ValueError("argv must not be empty")
        timeout = self.default_timeout if timeout is None else timeout
        try:
            completed = subprocess.run(
                args,
                input=input_bytes,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ProcessError(args, f"binary not found ({e})") from e
        except subprocess.TimeoutExpired as e:
            raise ProcessError(args, f"timed out after {timeout:.0f}s") from e
        except OSError as e:
            raise ProcessError(args, f"could not start ({e})") from e

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace")
            raise ProcessError(
                args,
                f"exited with code {completed.returncode}",
                returncode=completed.returncode,
                stderr=stderr,
            )
        return completed.stdout
