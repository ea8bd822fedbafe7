"""
sitesync - Cluster-wide site state coordination.

A site state change is applied in two phases:

    Coordinator: persist change -> broadcast command
    Every member (coordinator included): apply runtime effect

    - Initiator tasks run once, on the member the job was submitted to
    - Worker tasks run on each member when the command is delivered
    - Delivery is at-least-once and fire-and-forget; the coordinator only
      guarantees its own worker tasks

Usage:
    from sitesync.cluster import LocalCluster
    from sitesync.sites import MemorySiteStore
"""
