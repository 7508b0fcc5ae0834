"""hostagent: offline command hand-off and supervised execution for the host agent."""

__version__ = "0.1.0"
