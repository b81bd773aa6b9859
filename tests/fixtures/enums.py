from enum import Enum, auto


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"


class Priority(Enum):
    LOW = auto()
    MEDIUM = auto()
    HIGH = 10
    URGENT = auto()
