# Routers package

from . import requests, execute, history

__all__ = ["requests", "execute", "history"]
