from enum import Enum, auto


class EventType(Enum):
    # Animator lifecycle
    START = auto()
    FRAME = auto()
    END = auto()

    @classmethod
    def from_name(cls, name: str) -> "EventType":
        """Resolve 'start' / 'frame' / 'end' (any case) to an EventType"""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown event type '{name}'") from None
