"""
Application services: the stateful pieces of a chat session.

Import from the submodules directly; the command handlers depend on
message_list, and chat_session depends on the command handlers.
"""
