import enum

class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    DUPLICATE_ENTITY = "duplicate_entity"
    UNAVAILABLE = "unavailable"
    LIMIT_EXCEEDED = "limit_exceeded"
    INVALID_STATE = "invalid_state"
    INVALID_ARGUMENT = "invalid_argument"

class LendingError(Exception):
    """Recoverable failure of a lending operation; ``kind`` names the violated rule."""

    def __init__(self, kind: ErrorKind, detail: str):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail

    def __str__(self):
        return self.detail

    def __repr__(self):
        return f"LendingError({self.kind.name}, {self.detail!r})"
