import json

from procscan.constants import EXIT_FAILURE, EXIT_INVALID_USAGE, EXIT_SUCCESS
from scripts.procfs_snapshot import collect_snapshot, main


def test_snapshot_reads_status_and_nfsd(proc_root):
    results = collect_snapshot(
        ["1234"],
        proc_root=str(proc_root),
        nfsd_path=str(proc_root / "net" / "rpc" / "nfsd"),
    )

    assert not results["failures"]
    assert results["processes"]["1234"]["vm_rss_kb"] == 5044
    assert results["nfsd"]["proc3"]["values"] == 22


def test_main_writes_json(proc_root, tmp_path, capsys):
    output = tmp_path / "out" / "snapshot.json"

    code = main([
        "--pid", "1234",
        "--proc-root", str(proc_root),
        "--nfsd-path", str(proc_root / "net" / "rpc" / "nfsd"),
        "--output", str(output),
    ])

    assert code == EXIT_SUCCESS
    saved = json.loads(output.read_text())
    assert saved["processes"]["1234"]["fd_size"] == 256
    assert saved["nfsd"]["th"]["threads"] == 8
    assert "Procfs Snapshot Summary" in capsys.readouterr().out


def test_main_reports_missing_process(proc_root):
    code = main(["--pid", "4321", "--proc-root", str(proc_root), "--no-nfsd"])

    assert code == EXIT_FAILURE


def test_main_strict_fails_on_malformed_line(proc_root, tmp_path):
    nfsd = tmp_path / "nfsd"
    nfsd.write_text("rc 5 1\n")

    assert main(["--pid", "1234", "--proc-root", str(proc_root),
                 "--nfsd-path", str(nfsd)]) == EXIT_SUCCESS
    assert main(["--pid", "1234", "--proc-root", str(proc_root),
                 "--nfsd-path", str(nfsd), "--strict"]) == EXIT_FAILURE


def test_main_rejects_bad_pid():
    assert main(["--pid", "abc", "--no-nfsd"]) == EXIT_INVALID_USAGE
