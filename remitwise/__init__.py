"""RemitWise backend: audit event pipeline and the API routes it observes."""

__version__ = "0.1.0"
