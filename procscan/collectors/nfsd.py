"""
NFS server statistics collector.

Parses the tagged counter lines of /proc/net/rpc/nfsd, documented at
https://www.svennd.be/nfsd-stats-explained-procnetrpcnfsd/
"""

import logging
from dataclasses import asdict, dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Optional, Sequence, TextIO, Tuple, Type, TypeVar

from ..constants import NFSD_STATS_PATH
from ..core import LineFormatError, ProcfsFormatError, ProcfsReadError, parse_unsigned

logger = logging.getLogger(__name__)

FixedRecord = TypeVar("FixedRecord", bound="_FixedCounters")
VariableRecord = TypeVar("VariableRecord", bound="_VariableCounters")


def _counters(tag: str, tokens: Sequence[str]) -> List[int]:
    try:
        return [parse_unsigned(token) for token in tokens]
    except ValueError as e:
        raise LineFormatError(tag, str(e))


class _FixedCounters:
    """Line layout with exactly one counter per dataclass field."""

    TAG: ClassVar[str]

    @classmethod
    def from_tokens(cls: Type[FixedRecord], tokens: Sequence[str]) -> FixedRecord:
        names = [f.name for f in fields(cls)]
        if len(tokens) < len(names):
            raise LineFormatError(
                cls.TAG, f"expected {len(names)} counters, got {len(tokens)}")
        return cls(*_counters(cls.TAG, tokens[:len(names)]))


class _VariableCounters:
    """
    Line layout whose first token declares how many counters follow.

    The dataclass lists ``values`` first and then every counter name known
    for the tag. Counters past the declared count keep their zero default;
    declared counters past the known names are ignored.
    """

    TAG: ClassVar[str]

    @classmethod
    def counter_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))[1:]

    @classmethod
    def from_tokens(cls: Type[VariableRecord], tokens: Sequence[str]) -> VariableRecord:
        if not tokens:
            raise LineFormatError(cls.TAG, "missing declared counter count")

        declared = _counters(cls.TAG, tokens[:1])[0]
        names = cls.counter_names()
        present = min(declared, len(names))
        supplied = tokens[1:1 + present]
        if len(supplied) < present:
            raise LineFormatError(
                cls.TAG, f"declares {declared} counters, got {len(tokens) - 1}")

        if declared > len(names):
            logger.debug("%s: ignoring %d counters beyond the %d known",
                         cls.TAG, declared - len(names), len(names))

        return cls(declared, *_counters(cls.TAG, supplied))

    @property
    def populated_count(self) -> int:
        """Number of named counters actually present in the source line."""
        return min(self.values, len(self.counter_names()))

    def is_populated(self, name: str) -> bool:
        """
        Tell a reported counter from a defaulted zero.

        Args:
            name: Counter field name

        Returns:
            True if the source line carried a value for this counter

        Raises:
            ValueError: If name is not a counter of this record
        """
        return self.counter_names().index(name) < self.populated_count

    def counters(self) -> Dict[str, int]:
        """Named counters in declared order."""
        return {name: getattr(self, name) for name in self.counter_names()}


@dataclass(frozen=True)
class NFSdReplyCache(_FixedCounters):
    """rc line: reply cache."""

    TAG: ClassVar[str] = "rc"

    hits: int = 0
    misses: int = 0
    no_cache: int = 0


@dataclass(frozen=True)
class NFSdFileHandles(_FixedCounters):
    """fh line: file handles."""

    TAG: ClassVar[str] = "fh"

    stale: int = 0
    total_lookups: int = 0
    anon_lookups: int = 0
    dir_no_cache: int = 0
    no_dir_no_cache: int = 0


@dataclass(frozen=True)
class NFSdInputOutput(_FixedCounters):
    """io line: bytes read and written."""

    TAG: ClassVar[str] = "io"

    read: int = 0
    write: int = 0


@dataclass(frozen=True)
class NFSdThreads(_FixedCounters):
    """th line: threads. Older kernels append a usage histogram, ignored here."""

    TAG: ClassVar[str] = "th"

    threads: int = 0
    full_cnt: int = 0


@dataclass(frozen=True)
class NFSdReadAheadCache(_FixedCounters):
    """ra line: read-ahead cache."""

    TAG: ClassVar[str] = "ra"
    HISTOGRAM_BUCKETS: ClassVar[int] = 10

    cache_size: int = 0
    cache_histogram: Tuple[int, ...] = (0,) * 10
    not_found: int = 0

    @classmethod
    def from_tokens(cls, tokens: Sequence[str]) -> "NFSdReadAheadCache":
        need = cls.HISTOGRAM_BUCKETS + 2
        if len(tokens) < need:
            raise LineFormatError(cls.TAG, f"expected {need} counters, got {len(tokens)}")
        values = _counters(cls.TAG, tokens[:need])
        return cls(values[0], tuple(values[1:-1]), values[-1])


@dataclass(frozen=True)
class NFSdNetwork(_FixedCounters):
    """net line: network packets and connections."""

    TAG: ClassVar[str] = "net"

    net_count: int = 0
    udp_count: int = 0
    tcp_count: int = 0
    tcp_connect: int = 0


@dataclass(frozen=True)
class NFSdRPC(_FixedCounters):
    """rpc line: RPC calls and rejects."""

    TAG: ClassVar[str] = "rpc"

    rpc_count: int = 0
    bad_cnt: int = 0
    bad_fmt: int = 0
    bad_auth: int = 0
    badc_int: int = 0


@dataclass(frozen=True)
class NFSdV2Stats(_VariableCounters):
    """proc2 line: NFSv2 procedure counts. Values should be 18."""

    TAG: ClassVar[str] = "proc2"

    values: int = 0
    null: int = 0
    get_attr: int = 0
    set_attr: int = 0
    root: int = 0
    lookup: int = 0
    read_link: int = 0
    read: int = 0
    wr_cache: int = 0
    write: int = 0
    create: int = 0
    remove: int = 0
    rename: int = 0
    link: int = 0
    sym_link: int = 0
    mk_dir: int = 0
    rm_dir: int = 0
    read_dir: int = 0
    fs_stat: int = 0


@dataclass(frozen=True)
class NFSdV3Stats(_VariableCounters):
    """proc3 line: NFSv3 procedure counts. Values should be 22."""

    TAG: ClassVar[str] = "proc3"

    values: int = 0
    null: int = 0
    get_attr: int = 0
    set_attr: int = 0
    lookup: int = 0
    access: int = 0
    read_link: int = 0
    read: int = 0
    write: int = 0
    create: int = 0
    mk_dir: int = 0
    sym_link: int = 0
    mk_nod: int = 0
    remove: int = 0
    rm_dir: int = 0
    rename: int = 0
    link: int = 0
    read_dir: int = 0
    read_dir_plus: int = 0
    fs_stat: int = 0
    fs_info: int = 0
    path_conf: int = 0
    commit: int = 0


@dataclass(frozen=True)
class NFSdV4Stats(_VariableCounters):
    """proc4 line: NFSv4 procedure counts. Values should be 2."""

    TAG: ClassVar[str] = "proc4"

    values: int = 0
    null: int = 0
    compound: int = 0


@dataclass(frozen=True)
class NFSdV4Ops(_VariableCounters):
    """
    proc4ops line: NFSv4 operation counts, indexed by operation number.

    Values depends on the minor versions the kernel knows:
    v4.0 https://tools.ietf.org/html/rfc7530
    v4.1 https://tools.ietf.org/html/rfc5661
    v4.2 https://tools.ietf.org/html/rfc7862
    xattr https://tools.ietf.org/html/rfc8276
    """

    TAG: ClassVar[str] = "proc4ops"

    values: int = 0
    # v4.0, operations 0-39
    op0_unused: int = 0
    op1_unused: int = 0
    op2_future: int = 0
    access: int = 0
    close: int = 0
    commit: int = 0
    create: int = 0
    deleg_purge: int = 0
    deleg_return: int = 0
    get_attr: int = 0
    get_fh: int = 0
    link: int = 0
    lock: int = 0
    lockt: int = 0
    locku: int = 0
    lookup: int = 0
    lookup_root: int = 0
    nverify: int = 0
    open: int = 0
    open_attr: int = 0
    open_confirm: int = 0
    open_downgrade: int = 0
    put_fh: int = 0
    put_pub_fh: int = 0
    put_root_fh: int = 0
    read: int = 0
    read_dir: int = 0
    read_link: int = 0
    remove: int = 0
    rename: int = 0
    renew: int = 0
    restore_fh: int = 0
    save_fh: int = 0
    sec_info: int = 0
    set_attr: int = 0
    set_client_id: int = 0
    set_client_id_confirm: int = 0
    verify: int = 0
    write: int = 0
    release_lock_owner: int = 0
    # v4.1, operations 40-58
    backchannel_ctl: int = 0
    bind_conn_to_session: int = 0
    exchange_id: int = 0
    create_session: int = 0
    destroy_session: int = 0
    free_stateid: int = 0
    get_dir_delegation: int = 0
    get_device_info: int = 0
    get_device_list: int = 0
    layout_commit: int = 0
    layout_get: int = 0
    layout_return: int = 0
    sec_info_no_name: int = 0
    sequence: int = 0
    set_ssv: int = 0
    test_stateid: int = 0
    want_delegation: int = 0
    destroy_client_id: int = 0
    reclaim_complete: int = 0
    # v4.2, operations 59-71
    allocate: int = 0
    copy: int = 0
    copy_notify: int = 0
    deallocate: int = 0
    io_advise: int = 0
    layout_error: int = 0
    layout_stats: int = 0
    offload_cancel: int = 0
    offload_status: int = 0
    read_plus: int = 0
    seek: int = 0
    write_same: int = 0
    clone: int = 0
    # extended attributes, operations 72-75
    get_xattr: int = 0
    set_xattr: int = 0
    list_xattrs: int = 0
    remove_xattr: int = 0


NFSD_RECORD_TYPES: Dict[str, Type[Any]] = {
    record_type.TAG: record_type
    for record_type in (
        NFSdReplyCache,
        NFSdFileHandles,
        NFSdInputOutput,
        NFSdThreads,
        NFSdReadAheadCache,
        NFSdNetwork,
        NFSdRPC,
        NFSdV2Stats,
        NFSdV3Stats,
        NFSdV4Stats,
        NFSdV4Ops,
    )
}


def _tag_property(tag: str) -> property:
    return property(lambda self: self.records.get(tag),
                    doc=f"Record for the {tag} line, or None if absent.")


@dataclass
class NFSdStats:
    """
    One read of the NFS server statistics file.

    Records and line errors are keyed by tag. A tag appears in at most one
    of the two mappings; the last line carrying a tag decides which.
    """

    records: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, LineFormatError] = field(default_factory=dict)

    reply_cache = _tag_property("rc")
    file_handles = _tag_property("fh")
    input_output = _tag_property("io")
    threads = _tag_property("th")
    read_ahead_cache = _tag_property("ra")
    network = _tag_property("net")
    rpc = _tag_property("rpc")
    v2_stats = _tag_property("proc2")
    v3_stats = _tag_property("proc3")
    v4_stats = _tag_property("proc4")
    v4_ops = _tag_property("proc4ops")

    def __getitem__(self, tag: str) -> Any:
        return self.records[tag]

    def __contains__(self, tag: object) -> bool:
        return tag in self.records

    def get(self, tag: str, default: Optional[Any] = None) -> Any:
        return self.records.get(tag, default)


def parse_nfsd(stream: TextIO, strict: bool = False) -> NFSdStats:
    """
    Parse an NFS server statistics file.

    Args:
        stream: Open text stream positioned at the start of the file
        strict: Raise on the first malformed line instead of recording it

    Returns:
        NFSdStats with one record per well-formed known tag

    Raises:
        LineFormatError: If strict and a known tag's line is malformed
        ProcfsReadError: If the stream cannot be read
    """
    stats = NFSdStats()

    try:
        for line_number, line in enumerate(stream, 1):
            tokens = line.split()
            if not tokens:
                continue

            tag = tokens[0]
            record_type = NFSD_RECORD_TYPES.get(tag)
            if record_type is None:
                logger.debug("nfsd: ignoring unknown tag %r on line %d", tag, line_number)
                continue

            try:
                record = record_type.from_tokens(tokens[1:])
            except LineFormatError as e:
                error = LineFormatError(tag, e.reason, line_number, line.rstrip("\n"))
                if strict:
                    raise error from e
                logger.warning("nfsd: skipping malformed line: %s", error)
                stats.records.pop(tag, None)
                stats.errors[tag] = error
                continue

            stats.records[tag] = record
            stats.errors.pop(tag, None)
    except OSError as e:
        raise ProcfsReadError(f"nfsd: read failed: {e}") from e
    except UnicodeDecodeError as e:
        raise ProcfsFormatError(f"nfsd: undecodable input: {e}") from e

    return stats


class NFSdCollector:
    """
    Collect NFS server statistics from /proc/net/rpc/nfsd.

    The file only exists while the nfsd module is loaded.
    """

    def __init__(self, path: str = NFSD_STATS_PATH, strict: bool = False):
        """
        Initialize collector.

        Args:
            path: Location of the statistics file
            strict: Fail the whole read on a malformed line
        """
        self.path = path
        self.strict = strict

    def collect(self) -> NFSdStats:
        """
        Read and parse the statistics file.

        Returns:
            NFSdStats for this read

        Raises:
            ProcfsReadError: If the file cannot be opened or read
            LineFormatError: If strict and a line is malformed
        """
        try:
            with open(self.path, "r", errors="surrogateescape") as f:
                return parse_nfsd(f, strict=self.strict)
        except OSError as e:
            raise ProcfsReadError(f"Failed to read {self.path}: {e}") from e

    def snapshot(self) -> Dict[str, Any]:
        """
        Collect statistics as a plain dictionary.

        Returns:
            Dictionary containing:
            - nfsd: Per-tag counter dictionaries
              - errors: Messages for malformed lines that were skipped
        """
        stats = self.collect()
        nfsd: Dict[str, Any] = {tag: asdict(record) for tag, record in stats.records.items()}
        nfsd["errors"] = [str(error) for error in stats.errors.values()]
        return {"nfsd": nfsd}
