"""
Error taxonomy shared by the scoring core, services and API layer
"""
from typing import List, Optional


class ChanakyaError(Exception):
    """Base class for all application errors"""


class ValidationError(ChanakyaError):
    """One or more fields failed validation; carries every message at once"""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class NotFoundError(ChanakyaError):
    """Referenced entity does not exist"""

    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class PersistenceError(ChanakyaError):
    """Backing store or remote sync target rejected the operation"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class AmbiguousBandError(ChanakyaError):
    """Scoring scale bands overlap or leave a gap"""


class ScoreOutOfRangeError(ChanakyaError, ValueError):
    """Score falls outside the 0-100 scale"""

    def __init__(self, value: float):
        self.value = value
        super().__init__(f"Score {value} is outside the 0-100 scale")


class AuthorizationError(ChanakyaError):
    """Caller lacks the capability required for the operation"""


class BulkCreateError(ChanakyaError):
    """A bulk insert stopped partway; rows in `created` stay committed"""

    def __init__(self, created: list, index: int, error: ChanakyaError):
        self.created = list(created)
        self.index = index
        self.error = error
        super().__init__(f"Bulk create stopped at record {index}: {error}")
