"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Message list with live rendering of the reply being streamed
    - Send and stop controls driven by the chat client's state
    - New-session navigation

Contains no business logic. Everything goes through ChatClient and the API.
"""
