from .jobs import (
    BroadcastError as BroadcastError,
    ConcurrencyLimitError as ConcurrencyLimitError,
    InvalidJobTransitionError as InvalidJobTransitionError,
    PersistenceError as PersistenceError,
    SiteNotFoundError as SiteNotFoundError,
    SiteSyncError as SiteSyncError,
    UnknownJobTypeError as UnknownJobTypeError,
    WorkerError as WorkerError,
)
