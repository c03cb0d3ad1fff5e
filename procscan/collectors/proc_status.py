"""
Process status collector.

Reads ids, memory sizes and context switch counts from /proc/<pid>/status.
"""

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, TextIO, Union

from ..constants import PROC_ROOT
from ..core import FieldScanner, OrderedRecordParser, ProcfsReadError


@dataclass(frozen=True)
class ProcessStatus:
    """Status information about one process. Memory sizes are in kB."""

    tid: int
    tracer_pid: int
    uid_real: int
    uid_effective: int
    uid_saved_set: int
    uid_file_system: int
    gid_real: int
    gid_effective: int
    gid_saved_set: int
    gid_file_system: int
    fd_size: int
    vm_peak_kb: int
    vm_size_kb: int
    vm_lck_kb: int
    vm_hwm_kb: int
    vm_rss_kb: int
    vm_data_kb: int
    vm_stk_kb: int
    vm_exe_kb: int
    vm_lib_kb: int
    vm_pte_kb: int
    vm_swap_kb: int
    voluntary_ctxt_switches: int
    nonvoluntary_ctxt_switches: int


# Kernel emission order; the parser never looks back
STATUS_SCANNERS = (
    FieldScanner("Pid: %d", ("tid",)),
    FieldScanner("TracerPid: %d", ("tracer_pid",)),
    FieldScanner("Uid: %d %d %d %d", (
        "uid_real",
        "uid_effective",
        "uid_saved_set",
        "uid_file_system",
    )),
    FieldScanner("Gid: %d %d %d %d", (
        "gid_real",
        "gid_effective",
        "gid_saved_set",
        "gid_file_system",
    )),
    FieldScanner("FDSize: %d", ("fd_size",)),
    FieldScanner("VmPeak: %d kB", ("vm_peak_kb",)),
    FieldScanner("VmSize: %d kB", ("vm_size_kb",)),
    FieldScanner("VmLck: %d kB", ("vm_lck_kb",)),
    FieldScanner("VmHWM: %d kB", ("vm_hwm_kb",)),
    FieldScanner("VmRSS: %d kB", ("vm_rss_kb",)),
    FieldScanner("VmData: %d kB", ("vm_data_kb",)),
    FieldScanner("VmStk: %d kB", ("vm_stk_kb",)),
    FieldScanner("VmExe: %d kB", ("vm_exe_kb",)),
    FieldScanner("VmLib: %d kB", ("vm_lib_kb",)),
    FieldScanner("VmPTE: %d kB", ("vm_pte_kb",)),
    FieldScanner("VmSwap: %d kB", ("vm_swap_kb",)),
    FieldScanner("voluntary_ctxt_switches: %d", ("voluntary_ctxt_switches",)),
    FieldScanner("nonvoluntary_ctxt_switches: %d", ("nonvoluntary_ctxt_switches",)),
)


def parse_status(stream: TextIO) -> ProcessStatus:
    """
    Parse a process status file.

    Args:
        stream: Open text stream positioned at the start of the status file

    Returns:
        Fully populated ProcessStatus

    Raises:
        TruncatedInputError: If a required line is missing or out of order
        ProcfsReadError: If the stream cannot be read
    """
    parser = OrderedRecordParser(STATUS_SCANNERS, record="status")
    return ProcessStatus(**parser.parse(stream))


class ProcStatusCollector:
    """
    Collect process status from /proc/<pid>/status.

    Every call opens the file afresh; nothing is cached between calls.
    """

    def __init__(self, pid: Union[int, str] = "self", proc_root: str = PROC_ROOT):
        """
        Initialize collector.

        Args:
            pid: Process ID, or "self" for the calling process
            proc_root: Mount point of procfs
        """
        self.pid = pid
        self.proc_root = proc_root

    @property
    def path(self) -> str:
        return os.path.join(self.proc_root, str(self.pid), "status")

    def collect(self) -> ProcessStatus:
        """
        Read and parse the status file.

        Returns:
            ProcessStatus for the configured process

        Raises:
            ProcfsReadError: If the file cannot be opened or read, or ends early
        """
        try:
            with open(self.path, "r", errors="surrogateescape") as f:
                return parse_status(f)
        except OSError as e:
            raise ProcfsReadError(f"Failed to read {self.path}: {e}") from e

    def snapshot(self) -> Dict[str, Any]:
        """
        Collect status as a plain dictionary.

        Returns:
            Dictionary containing:
            - status: ProcessStatus fields plus the pid they were read for
        """
        status = asdict(self.collect())
        status["pid"] = str(self.pid)
        return {"status": status}
