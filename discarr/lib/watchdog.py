"""systemd notifications for the Discarr service.

Readiness, stopping and watchdog heartbeats go to $NOTIFY_SOCKET.  Every
call silently no-ops when the variable is unset (dev mode, containers).

Usage:
    from discarr.lib.watchdog import sd_notify, watchdog_loop
    sd_notify("READY=1")
    task = asyncio.create_task(watchdog_loop())
"""

import asyncio
import logging
import os
import socket

logger = logging.getLogger(__name__)


def sd_notify(msg: str) -> bool:
    """Send *msg* to the systemd notify socket.  Returns True if sent."""
    addr = os.environ.get("NOTIFY_SOCKET")
    if not addr:
        return False
    if addr.startswith("@"):
        addr = "\0" + addr[1:]  # abstract namespace
    with socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM) as sock:
        sock.sendto(msg.encode(), addr)
    return True


async def watchdog_loop(interval: int = 20):
    """Announce readiness, then send WATCHDOG=1 every *interval* seconds."""
    if not sd_notify("READY=1"):
        return
    logger.info("Watchdog started (interval=%ds)", interval)
    while True:
        sd_notify("WATCHDOG=1")
        await asyncio.sleep(interval)
