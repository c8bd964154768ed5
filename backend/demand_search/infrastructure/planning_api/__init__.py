"""Planning backend infrastructure package."""

from .planning_api_client import PlanningApiClient

__all__ = ["PlanningApiClient"]
