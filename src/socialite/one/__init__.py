from socialite.one.base import AbstractProvider
from socialite.one.server import Server, TwitterServer
from socialite.one.twitter import TwitterProvider

__all__ = [
    "AbstractProvider",
    "Server",
    "TwitterProvider",
    "TwitterServer",
]
