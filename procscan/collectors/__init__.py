"""
Collectors for procfs text files.

Available collectors:
- ProcStatusCollector: Process ids, memory and context switches via /proc/<pid>/status
- NFSdCollector: NFS server counters via /proc/net/rpc/nfsd
"""

from .proc_status import ProcStatusCollector, ProcessStatus, parse_status
from .nfsd import (
    NFSD_RECORD_TYPES,
    NFSdCollector,
    NFSdFileHandles,
    NFSdInputOutput,
    NFSdNetwork,
    NFSdReadAheadCache,
    NFSdReplyCache,
    NFSdRPC,
    NFSdStats,
    NFSdThreads,
    NFSdV2Stats,
    NFSdV3Stats,
    NFSdV4Ops,
    NFSdV4Stats,
    parse_nfsd,
)

__all__ = [
    'ProcStatusCollector',
    'ProcessStatus',
    'parse_status',
    'NFSD_RECORD_TYPES',
    'NFSdCollector',
    'NFSdFileHandles',
    'NFSdInputOutput',
    'NFSdNetwork',
    'NFSdReadAheadCache',
    'NFSdReplyCache',
    'NFSdRPC',
    'NFSdStats',
    'NFSdThreads',
    'NFSdV2Stats',
    'NFSdV3Stats',
    'NFSdV4Ops',
    'NFSdV4Stats',
    'parse_nfsd',
]
