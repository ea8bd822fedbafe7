from sitesync.env import Env
from sitesync.logging import Logger
from sitesync.sites import SiteStore

from .command_bus import CommandBus
from .member import ClusterMember


class LocalCluster:
    """
    A set of members sharing one in-process command bus and one site store.

    Usage:
        cluster = LocalCluster(store, ["node-a", "node-b", "node-c"])
        cluster.start()

        info = await cluster.member("node-a").activate_site("site-42")
        await cluster.wait_for_convergence()
    """

    def __init__(
        self,
        store: SiteStore,
        node_ids: list[str],
        env: Env | None = None,
        logger: Logger | None = None,
    ) -> None:
        if env is None:
            env = Env()

        self.env = env
        self.store = store
        self.bus = CommandBus(
            delivery_timeout=env.broadcast_delivery_timeout,
            logger=logger,
        )
        self.members: dict[str, ClusterMember] = {
            node_id: ClusterMember(
                self.bus,
                store,
                node_id=node_id,
                env=env,
                logger=logger,
            ) for node_id in node_ids
        }

    def member(self, node_id: str) -> ClusterMember:
        return self.members[node_id]

    def start(self) -> None:
        for member in self.members.values():
            member.start()

    async def stop(self) -> None:
        await self.bus.close()

        for member in self.members.values():
            await member.stop()

    async def wait_for_convergence(self) -> None:
        await self.bus.wait_for_deliveries()

    def accepting(self, site_uid: str) -> dict[str, bool]:
        return {
            node_id: member.is_accepting(site_uid)
            for node_id, member in self.members.items()
        }
