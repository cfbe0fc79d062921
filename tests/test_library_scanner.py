from cdcase.library.scan_library import ScanProgress
from cdcase.ui.workers.library_scanner import LibraryScanner


def _collect(scanner):
    got = {"progress": [], "tracks": [], "finished": []}
    scanner.progress_signal.connect(lambda a, b: got["progress"].append((a, b)))
    scanner.tracks_ready.connect(got["tracks"].append)
    scanner.finished_signal.connect(lambda ok, msg: got["finished"].append((ok, msg)))
    return got


def test_run_hands_back_what_the_scan_returned(make_track):
    track = make_track("1")
    calls = []

    def scan(references, progress=None):
        calls.append(references)
        progress(ScanProgress(files_scanned=2, files_count=2))
        return [track]

    scanner = LibraryScanner(scan, ["/music"])
    got = _collect(scanner)

    scanner.run()

    assert calls == [["/music"]]
    assert got["progress"] == [(0, 0), (2, 2)]
    assert got["tracks"] == [[track]]
    assert got["finished"] == [(True, "Read 1 of 2 file(s)")]


def test_run_reports_a_failed_scan():
    def scan(references, progress=None):
        raise OSError("disk gone")

    scanner = LibraryScanner(scan, ["/music"])
    got = _collect(scanner)

    scanner.run()

    assert got["tracks"] == []
    assert got["finished"] == [(False, "Scan failed: disk gone")]
