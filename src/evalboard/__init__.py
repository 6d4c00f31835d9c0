"""evalboard -- LLM-as-judge evaluation dashboard backend."""

__version__ = "0.1.0"
