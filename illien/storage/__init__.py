from .filesystem import atomic_write_text, write_recovery_copy
from .journal_repo import JournalRepository, StorageError

__all__ = ["atomic_write_text",
           "write_recovery_copy",
           "JournalRepository",
           "StorageError",
           ]
