class ActiveSiteService:
    """
    Registry of the sites this member considers active.

    One instance per member, passed to the jobs that need it. The
    coordinator flips its own entry right after the durable write so it
    converges before the broadcast round-trip completes.
    """

    def __init__(self, active: set[str] | None = None) -> None:
        self._active: set[str] = set(active or ())

    def activate(self, site_uid: str) -> None:
        self._active.add(site_uid)

    def deactivate(self, site_uid: str) -> None:
        self._active.discard(site_uid)

    def is_active(self, site_uid: str) -> bool:
        return site_uid in self._active

    def all(self) -> list[str]:
        return sorted(self._active)

    def __len__(self) -> int:
        return len(self._active)
