from .config import ControlProfile, load_control_profile

__all__ = [
    "ControlProfile",
    "load_control_profile",
]
