"""Pytest configuration and fixtures"""

import json
import os
from pathlib import Path
from typing import Dict, List, Tuple

import httpx
import pytest

from gitshelf.config import Settings
from gitshelf.core.catalog import CatalogEntry
from gitshelf.core.lifecycle import LifecycleManager
from gitshelf.infrastructure.http import HostingClient

API_HOST = "api.github.com"
RAW_HOST = "raw.githubusercontent.com"


class FakeHosting:
    """In-memory hosting API served through httpx.MockTransport"""

    def __init__(self):
        self.trees: Dict[Tuple[str, str], List[dict]] = {}
        self.files: Dict[Tuple[str, str, str], bytes] = {}
        self.urls: Dict[str, bytes] = {}
        # path -> number of upcoming requests that fail with HTTP 500
        self.failures: Dict[str, int] = {}
        self.requests: List[httpx.Request] = []

    def add_repo(self, repo: str, branch: str, files: Dict[str, bytes], extra_nodes: List[dict] = ()):
        nodes = [{"path": path, "type": "blob", "size": len(content)} for path, content in files.items()]
        nodes.extend(extra_nodes)
        self.trees[(repo, branch)] = nodes
        for path, content in files.items():
            self.files[(repo, branch, path)] = content

    def raw_requests(self, file_path: str) -> int:
        return sum(
            1 for request in self.requests
            if request.url.host == RAW_HOST and request.url.path.endswith("/" + file_path)
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url).split("?")[0]
        if url in self.urls:
            return httpx.Response(200, content=self.urls[url])

        parts = request.url.path.strip("/").split("/")
        if request.url.host == API_HOST:
            if parts == ["rate_limit"]:
                return httpx.Response(200, json={"rate": {"remaining": 59}})
            # repos/{owner}/{name}/git/trees/{branch}
            repo, branch = "/".join(parts[1:3]), "/".join(parts[5:])
            nodes = self.trees.get((repo, branch))
            if nodes is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json={"sha": "abc", "tree": nodes, "truncated": False})

        if request.url.host == RAW_HOST:
            repo, branch, path = "/".join(parts[:2]), parts[2], "/".join(parts[3:])
            if self.failures.get(path, 0) > 0:
                self.failures[path] -= 1
                return httpx.Response(500, text="boom")
            content = self.files.get((repo, branch, path))
            if content is None:
                return httpx.Response(404, text="404: Not Found")
            return httpx.Response(200, content=content)

        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakeLauncher:
    def __init__(self):
        self.launched: List[Tuple[List[str], Path]] = []

    def launch(self, command, workdir):
        self.launched.append((list(command), Path(workdir)))
        return "handle"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's GITSHELF_* variables out of the tests"""
    for name in list(os.environ):
        if name.startswith("GITSHELF_"):
            monkeypatch.delenv(name)


@pytest.fixture
def install_root(tmp_path: Path) -> Path:
    root = tmp_path / "apps"
    root.mkdir()
    return root


@pytest.fixture
def hosting() -> FakeHosting:
    fake = FakeHosting()
    fake.add_repo(
        "org/demo",
        "main",
        {"index.js": b"console.log('demo')\n", "src/a.js": b"module.exports = 1\n"},
        extra_nodes=[{"path": "src", "type": "tree"}],
    )
    return fake


@pytest.fixture
def client(hosting: FakeHosting):
    with HostingClient(transport=hosting.transport()) as hosting_client:
        yield hosting_client


@pytest.fixture
def sleeps() -> List[float]:
    """Delays requested by retry policies, recorded instead of slept"""
    return []


@pytest.fixture
def settings(install_root: Path) -> Settings:
    return Settings(install_root=install_root)


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def lifecycle(settings, client, launcher, sleeps) -> LifecycleManager:
    return LifecycleManager.from_settings(settings, client, launcher=launcher, sleep=sleeps.append)


@pytest.fixture
def demo_entry() -> CatalogEntry:
    return CatalogEntry(name="Demo", repo="org/demo", branch="main", folder="demo")


@pytest.fixture
def catalog_file(install_root: Path) -> Path:
    path = install_root / "available.json"
    path.write_text(json.dumps([
        {"name": "Demo", "repo": "org/demo", "branch": "main", "folder": "demo"},
        {"name": "Tool", "repo": "org/tool", "folder": "tool", "startFile": "main.js"},
    ]))
    return path


def _snapshot(folder: Path) -> Dict[str, bytes]:
    return {
        path.relative_to(folder).as_posix(): path.read_bytes()
        for path in sorted(folder.rglob("*"))
        if path.is_file()
    }


@pytest.fixture
def snapshot():
    """Relative path -> content of every file under a folder"""
    return _snapshot
