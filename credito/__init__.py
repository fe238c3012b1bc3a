"""Credit evaluation microservices: client directory, card directory and credit evaluator."""

__version__ = "0.1.0"
