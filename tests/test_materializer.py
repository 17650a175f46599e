"""Tests for repository materialization"""

import httpx
import pytest

from gitshelf.core.catalog import CatalogEntry
from gitshelf.core.materializer import Materializer
from gitshelf.core.remote import FileFetcher, RemoteTreeResolver
from gitshelf.infrastructure.exceptions import (FilesystemError, NetworkError,
                                                NotFoundError, RetryExhaustedError)
from gitshelf.infrastructure.http import HostingClient
from gitshelf.infrastructure.retry import RetryPolicy


class RecordingProgress:
    def __init__(self):
        self.events = []

    def start(self, total):
        self.events.append(("start", total))

    def advance(self):
        self.events.append(("advance",))

    def stop(self):
        self.events.append(("stop",))


@pytest.fixture
def materializer(client, install_root, sleeps) -> Materializer:
    return Materializer(
        RemoteTreeResolver(client),
        FileFetcher(client, RetryPolicy(4, 1.0, sleep=sleeps.append)),
        install_root,
    )


class TestMaterializer:
    """Test Materializer"""

    def test_demo_scenario_writes_exactly_the_blobs(self, materializer, demo_entry, install_root, snapshot):
        result = materializer.materialize(demo_entry)

        assert result.succeeded
        assert result.files_written == 2
        assert result.error is None
        assert snapshot(install_root / "demo") == {
            "index.js": b"console.log('demo')\n",
            "src/a.js": b"module.exports = 1\n",
        }
        # src exists only as the parent of src/a.js
        assert (install_root / "demo" / "src").is_dir()

    def test_files_fetched_in_listing_order(self, materializer, hosting, install_root):
        hosting.add_repo("org/order", "dev", {"b.txt": b"b", "a.txt": b"a", "c/d.txt": b"d"})
        entry = CatalogEntry(name="Order", repo="org/order", branch="dev", folder="order")

        materializer.materialize(entry)

        raw_paths = [r.url.path for r in hosting.requests if r.url.host == "raw.githubusercontent.com"]
        assert raw_paths == ["/org/order/dev/b.txt", "/org/order/dev/a.txt", "/org/order/dev/c/d.txt"]

    def test_progress_reports_total_and_each_file(self, materializer, demo_entry):
        progress = RecordingProgress()

        materializer.materialize(demo_entry, progress)

        assert progress.events == [("start", 2), ("advance",), ("advance",), ("stop",)]

    def test_missing_repository_fails_without_writing(self, materializer, install_root):
        entry = CatalogEntry(name="Ghost", repo="org/ghost", folder="ghost")

        result = materializer.materialize(entry)

        assert not result.succeeded
        assert result.files_written == 0
        assert isinstance(result.error, NotFoundError)
        assert not (install_root / "ghost").exists()

    def test_tree_listing_network_failure_is_not_retried(self, install_root, sleeps):
        calls = []

        def down(request):
            calls.append(request)
            raise httpx.ConnectError("down", request=request)

        with HostingClient(transport=httpx.MockTransport(down)) as client:
            materializer = Materializer(
                RemoteTreeResolver(client),
                FileFetcher(client, RetryPolicy(4, 1.0, sleep=sleeps.append)),
                install_root,
            )
            result = materializer.materialize(CatalogEntry(name="Demo", repo="org/demo", folder="demo"))

        assert isinstance(result.error, NetworkError)
        assert len(calls) == 1
        assert sleeps == []

    def test_fetch_failure_aborts_remaining_files(self, materializer, hosting, demo_entry, install_root, sleeps):
        hosting.failures["src/a.js"] = 100

        result = materializer.materialize(demo_entry)

        assert not result.succeeded
        assert result.files_written == 1
        assert result.total_files == 2
        assert isinstance(result.error, RetryExhaustedError)
        # Partial folder is left behind
        assert (install_root / "demo" / "index.js").exists()
        assert not (install_root / "demo" / "src" / "a.js").exists()

    def test_repository_without_files_creates_empty_folder(self, materializer, hosting, install_root):
        hosting.add_repo("org/empty", "main", {}, extra_nodes=[{"path": "docs", "type": "tree"}])
        entry = CatalogEntry(name="Empty", repo="org/empty", folder="empty")

        result = materializer.materialize(entry)

        assert result.succeeded
        assert result.files_written == 0
        assert list((install_root / "empty").iterdir()) == []

    def test_path_escaping_folder_is_refused(self, materializer, hosting, install_root):
        hosting.add_repo("org/evil", "main", {"../outside.txt": b"x"})
        entry = CatalogEntry(name="Evil", repo="org/evil", folder="evil")

        result = materializer.materialize(entry)

        assert isinstance(result.error, FilesystemError)
        assert not (install_root / "outside.txt").exists()
