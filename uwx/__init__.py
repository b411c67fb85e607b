"""UWX - URL Wordlist eXtractor."""

__version__ = "0.1.0"
