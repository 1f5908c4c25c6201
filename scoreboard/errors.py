from typing import Literal

ContestErrorKind = Literal["precondition", "not_found", "duplicate"]


class ContestError(Exception):
    """
    A recoverable failure of a contest operation.
    The operation that raised it left the contest state untouched.
    """

    kind: ContestErrorKind
    reason: str

    def __init__(self, kind: ContestErrorKind, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(reason)


class PreconditionViolation(ContestError):
    def __init__(self, reason: str):
        super().__init__("precondition", reason)


class NotFound(ContestError):
    def __init__(self, reason: str):
        super().__init__("not_found", reason)


class DuplicateEntity(ContestError):
    def __init__(self, reason: str):
        super().__init__("duplicate", reason)
