"""
Bot core: sessions, event classification, keyword commands and event handling.

Transport-agnostic. Delivery goes through the sender handed to MessengerBot.
"""
