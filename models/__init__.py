"""
models/ - Domain Models
=======================
Dataclasses and enums shared by the engine, the repository and the bot.
"""
