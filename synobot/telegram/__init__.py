"""Telegram front end: Bot API client, update models, keyboards and command dispatch."""
