"""Pure domain pieces: the service registry and token generation.

These modules are free of FastAPI/HTTP concerns so they can be unit-tested
and reused by both the server and the smoke runner.
"""
__all__ = ["registry", "tokens"]
