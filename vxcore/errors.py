"""Exception types raised by vxcore."""


class VxError(Exception):
    """Base class for every error raised by vxcore."""


class InvalidRequestError(VxError, ValueError):
    """A verification request is malformed and cannot start a run."""


class OracleUnavailableError(VxError):
    """The attestation oracle could not supply a record for an index.

    The client catches this internally and reports ``None``; it is raised
    only from the lower-level ``VxClient.fetch_or_raise``.
    """

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(f"Vx attestation unavailable for game {index}: {reason}")
        self.index = index
        self.reason = reason
