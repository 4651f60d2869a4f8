"""plan-companion: personal task tracker with AI-assisted planning."""

__version__ = "0.1.0"
