"""Fleet Advisor: rule-based operational status recommendations for rail trainsets."""

__version__ = "0.1.0"
