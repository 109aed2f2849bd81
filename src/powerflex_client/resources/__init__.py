"""Resource-specific convenience wrappers."""
from .system import SystemsResource
from .volumes import VolumesResource

__all__ = ["SystemsResource", "VolumesResource"]
