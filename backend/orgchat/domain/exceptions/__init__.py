"""
DOMAIN EXCEPTIONS - Contained messaging failures and rule violations

Messaging errors are raised by ports/handlers and caught one layer up, where
they are logged and turned into a degraded state or a failure result.
"""

from orgchat.domain.exceptions.messaging_error import MessagingError
from orgchat.domain.exceptions.directory_read_error import DirectoryReadError
from orgchat.domain.exceptions.history_load_error import HistoryLoadError
from orgchat.domain.exceptions.send_persist_error import SendPersistError
from orgchat.domain.exceptions.mutation_persist_error import MutationPersistError
from orgchat.domain.exceptions.subscription_error import SubscriptionError
from orgchat.domain.exceptions.validation_error import DomainValidationError

__all__ = [
    "MessagingError",
    "DirectoryReadError",
    "HistoryLoadError",
    "SendPersistError",
    "MutationPersistError",
    "SubscriptionError",
    "DomainValidationError",
]
