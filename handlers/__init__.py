"""
handlers/ - Presentation Layer
================================
Telegram command handlers. Each one parses the command arguments, calls
PaymentService, and replies with the text it returns.
"""
