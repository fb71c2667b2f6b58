"""Room-scoped presence and broadcast fan-out for the Scrum Poker game."""

__version__ = "1.0.0"
