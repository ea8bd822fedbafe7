"""
Cluster module - Command delivery between members.

- CommandBus: In-process fan-out transport
- CommandBroadcaster: A member's publish/on_command endpoint
- ClusterMember: Member identity, runtime site state and worker phase wiring
- LocalCluster: Members sharing one bus and one store
"""

from .command_bus import CommandBus as CommandBus
from .command_broadcaster import (
    CommandBroadcaster as CommandBroadcaster,
    CommandHandler as CommandHandler,
)
from .config import MemberConfig as MemberConfig
from .member import ClusterMember as ClusterMember
from .local_cluster import LocalCluster as LocalCluster
