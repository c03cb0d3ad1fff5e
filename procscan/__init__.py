"""
Parsers for line-oriented procfs text files.

This package turns /proc/<pid>/status and /proc/net/rpc/nfsd into typed
records, tolerating the field reordering and additions that come with
newer kernels and NFS minor versions.
"""

from .core import (
    FieldScanner,
    OrderedRecordParser,
    ProcfsError,
    ProcfsReadError,
    ProcfsFormatError,
    TruncatedInputError,
    LineFormatError,
)
from .collectors import (
    ProcStatusCollector,
    ProcessStatus,
    parse_status,
    NFSdCollector,
    NFSdStats,
    parse_nfsd,
)
from .constants import (
    STATUS_OK,
    STATUS_WARN,
    STATUS_ERROR,
    STATUS_INFO,
    EXIT_SUCCESS,
    EXIT_FAILURE,
    EXIT_INVALID_USAGE
)

__all__ = [
    'FieldScanner',
    'OrderedRecordParser',
    'ProcfsError',
    'ProcfsReadError',
    'ProcfsFormatError',
    'TruncatedInputError',
    'LineFormatError',
    'ProcStatusCollector',
    'ProcessStatus',
    'parse_status',
    'NFSdCollector',
    'NFSdStats',
    'parse_nfsd',
    'STATUS_OK',
    'STATUS_WARN',
    'STATUS_ERROR',
    'STATUS_INFO',
    'EXIT_SUCCESS',
    'EXIT_FAILURE',
    'EXIT_INVALID_USAGE'
]
