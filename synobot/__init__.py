"""synobot: control a Synology NAS from a Telegram chat."""

__version__ = "0.1.0"
