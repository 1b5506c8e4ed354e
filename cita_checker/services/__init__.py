"""Services: availability workflow, notifications and the run boundary."""

from .availability_workflow import AvailabilityWorkflow
from .runner import CheckRunner, RunReport

__all__ = ["AvailabilityWorkflow", "CheckRunner", "RunReport"]
