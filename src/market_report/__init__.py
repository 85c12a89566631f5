"""Area-scoped real-estate market reports over an append-only MLS listings store."""

__version__ = "0.1.0"
