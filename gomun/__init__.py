"""GoMun shared agenda: FastAPI backend and terminal client."""

__version__ = "0.1.0"
