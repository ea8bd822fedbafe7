import msgspec


class SiteRecord(msgspec.Struct, kw_only=True):
    """Persisted site. Only ``active`` is owned by the job core."""
    uid: str
    hostname: str = ""
    display_name: str = ""
    active: bool = False
    last_modified: float | None = None
