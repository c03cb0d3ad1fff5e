"""
Status, exit code and path constants shared by the parsers and scripts.

These constants keep script output consistent with the bash tooling
conventions and give collectors their default procfs locations.
"""

# Status indicators (matching bash script conventions)
STATUS_OK = "OK"
STATUS_WARN = "WARN"
STATUS_ERROR = "ERROR"
STATUS_INFO = "INFO"

# Exit codes (Unix standard)
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INVALID_USAGE = 2

# Default procfs locations
PROC_ROOT = "/proc"
NFSD_STATS_PATH = "/proc/net/rpc/nfsd"
