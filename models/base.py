from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class ImportState(str, enum.Enum):
    """Import job lifecycle state"""
    STARTED = "started"
    ONGOING = "ongoing"
    FINISHED = "finished"
    ERRORED = "errored"
    RATE_LIMITED = "rate_limited"
    # Derived at read time only, never persisted by the manager
    KILLED = "killed"


class DimensionScope(str, enum.Enum):
    """Scope of an extra custom dimension"""
    VISIT = "visit"
    ACTION = "action"
