"""Wait for the daemon socket to appear.

The socket path appearing only means the daemon got as far as binding it;
the IPC client remains the authority on whether it actually answers.
"""

import time
from pathlib import Path
from typing import Callable

DEFAULT_TIMEOUT_S = 3.0
DEFAULT_INTERVAL_S = 0.1


def await_socket(
    socket_path: Path,
    timeout: float = DEFAULT_TIMEOUT_S,
    interval: float = DEFAULT_INTERVAL_S,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """
    Poll for `socket_path` until it exists or `timeout` elapses.

    The final sleep is clipped to the deadline, so the call never blocks
    longer than `timeout` plus one poll interval.

    Returns:
        True if the path appeared in time, False otherwise
    """
    deadline = clock() + timeout

    while True:
        if socket_path.exists():
            return True
        remaining = deadline - clock()
        if remaining <= 0:
            return False
        sleep(min(interval, remaining))
