"""
services/ - Business Logic Layer
================================
Services combine the clock, repositories and the engine, and format the
results for handlers.
"""
