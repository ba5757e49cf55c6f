"""reviewpool core library - models, persistence, and the assignment engine."""
from . import assignment
from . import config
from . import errors
from . import models
from . import schemas
from . import services
from . import storage

__all__ = [
    "assignment",
    "config",
    "errors",
    "models",
    "schemas",
    "services",
    "storage",
]
