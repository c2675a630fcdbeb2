"""Personal trip itinerary planner: schedule, budgets and exchange rates."""

__version__ = "0.1.0"
