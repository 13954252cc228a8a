"""synobot HTTP API package.

Sub-modules expose FastAPI routers:
- webhook: Telegram update delivery
"""
