"""
Cluster Member - One participant in site job coordination.

A member owns its runtime state (traffic gate, active site registry) and
reacts to every command registered in its JobRegistry by running the
matching job's worker tasks. Any member can also coordinate a job: its
JobManager runs the initiator tasks, whose broadcast then reaches every
member including itself.
"""

from sitesync.env import Env
from sitesync.logging import Logger, LoggingConfig
from sitesync.models import CommandMessage, JobInfo, SiteRecord
from sitesync.jobs import (
    ConcurrencyLimiter,
    JobManager,
    JobRegistry,
    ProgressTracker,
    SiteJobRunner,
    create_default_registry,
)
from sitesync.sites import (
    ActiveSiteService,
    SiteService,
    SiteStore,
    TrafficGate,
)

from .command_broadcaster import CommandBroadcaster
from .command_bus import CommandBus
from .config import MemberConfig
from .logging_models import MemberDebug, MemberError


class ClusterMember:

    def __init__(
        self,
        bus: CommandBus,
        store: SiteStore,
        node_id: str | None = None,
        env: Env | None = None,
        registry: JobRegistry | None = None,
        traffic_gate: TrafficGate | None = None,
        logger: Logger | None = None,
    ) -> None:
        if env is not None:
            LoggingConfig().update(**env.get_logging_config())

        else:
            env = Env()

        self.config = MemberConfig.from_env(env, node_id=node_id)
        self.node_id = self.config.node_id

        self._owns_logger = logger is None
        if logger is None:
            logger = Logger()

            if self.config.logfile_path:
                logger.configure(path=self.config.logfile_path)

        self._logger = logger

        self.registry = registry if registry is not None else create_default_registry()
        self.traffic_gate = traffic_gate if traffic_gate is not None else TrafficGate()
        self.active_sites = ActiveSiteService()
        self.site_service = SiteService(
            self.node_id,
            store,
            active_sites=self.active_sites,
            traffic_gate=self.traffic_gate,
        )

        self.limiter = ConcurrencyLimiter(
            default_limit=self.config.default_parallel_limit,
            wait_timeout=self.config.concurrency_wait_timeout,
        )
        self.progress = ProgressTracker()
        self.broadcaster = CommandBroadcaster(
            self.node_id,
            bus,
            logger=self._logger,
        )
        self.jobs = JobManager(
            self.node_id,
            self.create_job,
            progress=self.progress,
            logger=self._logger,
        )

        for job_type in self.registry:
            self.broadcaster.on_command(job_type.command, self._handle_command)

    @property
    def running(self) -> bool:
        return self.broadcaster.connected

    def start(self) -> None:
        self.broadcaster.connect()

    async def stop(self) -> None:
        self.broadcaster.disconnect()

        if self._owns_logger:
            await self._logger.close()

    def create_job(
        self,
        job_type: str,
        site: str | SiteRecord,
        job_id: str | None = None,
    ) -> SiteJobRunner:
        job_class = self.registry.get(job_type).job_class

        return job_class(
            site,
            self.site_service,
            job_id=job_id,
            node_id=self.node_id,
            limiter=self.limiter,
            progress=self.progress,
            logger=self._logger,
            broadcaster=self.broadcaster,
        )

    async def submit(
        self,
        job_type: str,
        site: str | SiteRecord,
    ) -> JobInfo:
        return await self.jobs.submit(job_type, site)

    async def activate_site(self, site: str | SiteRecord) -> JobInfo:
        return await self.submit("site_activate", site)

    async def deactivate_site(self, site: str | SiteRecord) -> JobInfo:
        return await self.submit("site_deactivate", site)

    def is_accepting(self, site_uid: str) -> bool:
        return self.traffic_gate.is_accepting(site_uid)

    async def _handle_command(self, message: CommandMessage) -> None:
        job_type = self.registry.for_command(message.command)

        if (site := message.site) is None:
            await self._logger.log(MemberError(
                message=f"Command {message.command} from {message.origin} has no site",
                node_id=self.node_id,
                command=message.command,
                site="",
            ))

            return

        await self._logger.log(MemberDebug(
            message=f"Received {message.command} for {site} from {message.origin}",
            node_id=self.node_id,
            command=message.command,
            site=site,
        ))

        job = self.create_job(
            job_type.tag,
            site,
            job_id=message.job_id,
        )

        await job.run_worker_tasks()
