"""Exception taxonomy for the recorder pipeline."""

from typing import List, Optional


class NewsRecorderError(Exception):
    """Base class for every error raised by news_recorder."""


class ProcessError(NewsRecorderError):
    """An external tool exited non-zero, timed out, or could not be started."""

    def __init__(
        self,
        argv: List[str],
        message: str,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        detail = f"{argv[0] if argv else '?'}: {message}"
        if stderr:
            detail += f" ({stderr.strip()[-300:]})"
        super().__init__(detail)


class NavigationError(NewsRecorderError):
    """The portal page did not reach DOM content loaded in time."""


class MergeError(NewsRecorderError):
    """The media combiner could not produce any output file."""


class InvalidMergeRequest(MergeError, ValueError):
    """combine() was called without a video or output path."""


class SessionAborted(NewsRecorderError):
    """The run was cancelled while a portal session was in flight."""
