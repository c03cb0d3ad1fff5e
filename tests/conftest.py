import pytest

STATUS_LINES = [
    "Name:\tbash",
    "Umask:\t0022",
    "State:\tS (sleeping)",
    "Tgid:\t1234",
    "Ngid:\t0",
    "Pid:\t1234",
    "PPid:\t1000",
    "TracerPid:\t0",
    "Uid:\t1000\t1001\t1002\t1003",
    "Gid:\t100\t101\t102\t103",
    "FDSize:\t256",
    "Groups:\t4 24 27 1000 ",
    "NStgid:\t1234",
    "NSpid:\t1234",
    "VmPeak:\t   10304 kB",
    "VmSize:\t   10240 kB",
    "VmLck:\t       0 kB",
    "VmPin:\t       0 kB",
    "VmHWM:\t    5120 kB",
    "VmRSS:\t    5044 kB",
    "RssAnon:\t    1900 kB",
    "RssFile:\t    3144 kB",
    "RssShmem:\t       0 kB",
    "VmData:\t    1980 kB",
    "VmStk:\t     132 kB",
    "VmExe:\t     900 kB",
    "VmLib:\t    2040 kB",
    "VmPTE:\t      60 kB",
    "VmSwap:\t       8 kB",
    "HugetlbPages:\t       0 kB",
    "Threads:\t1",
    "SigQ:\t0/62811",
    "Cpus_allowed_list:\t0-7",
    "voluntary_ctxt_switches:\t150",
    "nonvoluntary_ctxt_switches:\t3",
]

NFSD_LINES = [
    "rc 0 6 18622",
    "fh 0 0 0 0 0",
    "io 157286400 4096",
    "th 8 0 0.000 0.000 0.000 0.000 0.000 0.000 0.000 0.000 0.000 0.000",
    "ra 32 1 2 3 4 5 6 7 8 9 10 11",
    "net 18628 0 18628 6",
    "rpc 18628 1 0 1 0",
    "proc2 18 2 69 0 0 4410 0 0 0 0 0 0 0 0 0 0 0 99 2",
    "proc3 22 2 112 0 2719 111 0 0 0 0 0 0 0 0 0 0 0 27 216 0 2 1 0",
    "proc4 2 2 10853",
    "proc4ops 40 " + " ".join(str(n) for n in range(100, 140)),
]


@pytest.fixture
def status_lines():
    return list(STATUS_LINES)


@pytest.fixture
def status_text():
    return "\n".join(STATUS_LINES) + "\n"


@pytest.fixture
def nfsd_lines():
    return list(NFSD_LINES)


@pytest.fixture
def nfsd_text():
    return "\n".join(NFSD_LINES) + "\n"


@pytest.fixture
def proc_root(tmp_path, status_text, nfsd_text):
    """Fake procfs tree with one process and the nfsd statistics file."""
    (tmp_path / "1234").mkdir()
    (tmp_path / "1234" / "status").write_text(status_text)
    (tmp_path / "net" / "rpc").mkdir(parents=True)
    (tmp_path / "net" / "rpc" / "nfsd").write_text(nfsd_text)
    return tmp_path
