from .google import GooglePage

__all__ = ["GooglePage"]
