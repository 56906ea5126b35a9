# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Abstract base class for Discarr output backends.

An output backend owns the remote Discord session that presents the video
and describes the delivery target a feeder must write to.

    unprepared --prepare--> prepared --start_stream--> streaming
                               ^                           |
                               +-------stop_stream---------+

    any state --shutdown--> terminal (instance unusable afterwards)

prepare, start_stream and stop_stream are idempotent.  start_stream
prepares first when needed.  shutdown never raises.
"""

from abc import ABC, abstractmethod

from ..errors import BackendNotImplemented
from ..target import Target


class OutputBackend(ABC):
    """Interface every output backend must implement."""

    name: str = ""

    @abstractmethod
    async def prepare(self) -> None: ...

    @abstractmethod
    def get_target(self) -> Target: ...

    @abstractmethod
    async def start_stream(self) -> None: ...

    @abstractmethod
    async def stop_stream(self) -> None: ...

    @abstractmethod
    async def shutdown(self) -> None: ...

    # -- Optional: override in backends with an interactive login --

    async def get_login(self) -> tuple[str, object]:
        """Return ``("png", bytes)`` or ``("json", dict)`` for the login flow."""
        raise BackendNotImplemented(f"Login is not available for the {self.name} backend")
