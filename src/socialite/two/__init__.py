from socialite.two.apple import AppleProvider
from socialite.two.base import AbstractProvider
from socialite.two.bitbucket import BitbucketProvider
from socialite.two.facebook import FacebookProvider
from socialite.two.github import GithubProvider
from socialite.two.google import GoogleProvider
from socialite.two.linkedin import LinkedInProvider

__all__ = [
    "AbstractProvider",
    "AppleProvider",
    "BitbucketProvider",
    "FacebookProvider",
    "GithubProvider",
    "GoogleProvider",
    "LinkedInProvider",
]
