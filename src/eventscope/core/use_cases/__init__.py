"""Application use cases built on the decoding core."""
