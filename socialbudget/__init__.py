"""SocialBudget: shared team expenses and quarterly budget rollups."""

__version__ = "0.1.0"
