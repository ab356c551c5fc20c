from classroom_matcher.cli.__main__ import main

__all__ = ["main"]
