from .doctor import run_doctor_checks
from .exporter import export_message

__all__ = ["export_message", "run_doctor_checks"]
