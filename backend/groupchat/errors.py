"""Typed failures raised by the membership services.

Each subclass maps to one failure kind and its HTTP status. Services raise
them before touching any entity, so a failed call never leaves a partial
cascade behind; ``main.py`` turns them into JSON error responses.
"""


class MembershipError(Exception):
    """Base class for every per-request failure."""

    kind = "Error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"detail": self.message, "error": self.kind}


class NotFound(MembershipError):
    """A referenced user, group, channel, or interest does not exist."""

    kind = "NotFound"
    status_code = 404


class Forbidden(MembershipError):
    """The actor lacks the capability, or the target is protected."""

    kind = "Forbidden"
    status_code = 403


class Conflict(MembershipError):
    """Duplicate name, membership, interest, or ban."""

    kind = "Conflict"
    status_code = 409


class BadRequest(MembershipError):
    """Missing fields or an unmet precondition."""

    kind = "BadRequest"
    status_code = 400


class Unauthorized(MembershipError):
    """Supplied credential does not match."""

    kind = "Unauthorized"
    status_code = 401
