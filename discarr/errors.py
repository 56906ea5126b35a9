# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Error taxonomy for Discarr.

Every failure a command can surface is a ``DiscarrError`` subclass with a
stable ``kind`` string and the HTTP status the API answers with.  Nothing
below the HTTP layer retries or swallows these; the coordinator re-raises
them unchanged and the server turns them into::

    {"error": "<kind>", "message": "<text>"}
"""


class DiscarrError(Exception):
    """Base class for all structured command failures."""

    kind = "DiscarrError"
    status = 500
    default_message = "Discarr error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class InvalidRequest(DiscarrError):
    kind = "InvalidRequest"
    status = 400
    default_message = "Invalid request"


class NothingPlaying(DiscarrError):
    kind = "NothingPlaying"
    status = 400
    default_message = "Nothing is playing"


class UnsupportedTarget(DiscarrError):
    kind = "UnsupportedTarget"
    default_message = "Feeder does not support this target"


class NoFeederForTarget(DiscarrError):
    kind = "NoFeederForTarget"
    default_message = "No feeder supports this target"


class SessionUnavailable(DiscarrError):
    kind = "SessionUnavailable"
    status = 503
    default_message = "Remote session is not configured"


class SessionError(DiscarrError):
    kind = "SessionError"
    status = 502
    default_message = "Remote session failed"


class SessionTimeout(SessionError):
    kind = "SessionTimeout"
    status = 504
    default_message = "Remote session timed out"


class BackendNotImplemented(DiscarrError):
    # Named to avoid shadowing the NotImplemented builtin; the kind keeps
    # the public name.
    kind = "NotImplemented"
    status = 501
    default_message = "Output backend is not implemented"


class UnresolvableReference(DiscarrError):
    kind = "UnresolvableReference"
    status = 400
    default_message = "Could not resolve catalog reference"


class IntegrationNotConfigured(DiscarrError):
    kind = "IntegrationNotConfigured"
    status = 503
    default_message = "Jellyfin integration not configured"


class FeederError(DiscarrError):
    kind = "FeederError"
    default_message = "Video feeder could not be started"
