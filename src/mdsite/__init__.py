"""Personal website server: GitHub-rendered markdown, HTML templates, TTL cache."""

__version__ = "0.1.0"
