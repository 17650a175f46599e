"""Tests for the command line and the interactive menu"""

import io
import json

import pytest
from rich.console import Console
from typer.testing import CliRunner

from gitshelf.cli import main as cli_main
from gitshelf.cli.main import app
from gitshelf.cli.menu import InteractiveMenu, MenuAction
from gitshelf.cli.utils.config import ConfigManager
from gitshelf.cli.utils.context import CLIContext
from gitshelf.cli.utils.output import OutputFormatter
from gitshelf.config import Settings
from gitshelf.infrastructure.http import HostingClient

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config" / "config.yml"


@pytest.fixture
def invoke(monkeypatch, hosting, launcher, install_root, config_path):
    """Run the CLI against the fake hosting API and launcher"""
    monkeypatch.setattr(
        "gitshelf.cli.utils.context.HostingClient",
        lambda **kwargs: HostingClient(transport=hosting.transport()),
    )
    monkeypatch.setattr("gitshelf.core.lifecycle.manager.SubprocessLauncher", lambda: launcher)
    real_setup_logging = cli_main.setup_logging
    monkeypatch.setattr(
        "gitshelf.cli.main.setup_logging",
        lambda *args, **kwargs: real_setup_logging("WARNING", stream=io.StringIO()),
    )
    monkeypatch.setattr(cli_main, "console", Console(width=200))
    monkeypatch.setenv("GITSHELF_FETCH_RETRY_DELAY", "0")
    monkeypatch.setenv("GITSHELF_REMOVE_RETRY_DELAY", "0")

    def run(*args, input=None, root=None):
        base = ["--config", str(config_path), "--install-root", str(root or install_root)]
        return runner.invoke(app, base + list(args), input=input)

    return run


class TestEntryCommands:
    """Test list, install, uninstall, update and start"""

    def test_list_json(self, invoke, catalog_file):
        result = invoke("--output", "json", "list")

        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert [row["name"] for row in rows] == ["Demo", "Tool"]
        assert rows[0]["repo"] == "org/demo"
        assert not any(row["installed"] for row in rows)

    def test_list_installed_only(self, invoke, catalog_file, install_root):
        (install_root / "tool").mkdir()

        result = invoke("--output", "json", "list", "--installed")

        assert [row["name"] for row in json.loads(result.stdout)] == ["Tool"]

    def test_list_table(self, invoke, catalog_file):
        result = invoke("list")

        assert result.exit_code == 0
        assert "Catalog" in result.stdout
        assert "org/demo" in result.stdout

    def test_install(self, invoke, catalog_file, install_root):
        result = invoke("install", "Demo")

        assert result.exit_code == 0
        assert "Downloaded Demo to demo" in result.stdout
        assert (install_root / "demo" / "src" / "a.js").read_bytes() == b"module.exports = 1\n"

    def test_install_keeps_folder_when_overwrite_declined(self, invoke, catalog_file, install_root):
        (install_root / "demo").mkdir()
        (install_root / "demo" / "index.js").write_text("local")

        result = invoke("install", "demo", input="n\n")

        assert result.exit_code == 0
        assert "Kept existing Demo" in result.stdout
        assert (install_root / "demo" / "index.js").read_text() == "local"

    def test_install_yes_overwrites(self, invoke, catalog_file, install_root):
        (install_root / "demo").mkdir()
        (install_root / "demo" / "index.js").write_text("local")

        result = invoke("install", "Demo", "--yes")

        assert result.exit_code == 0
        assert (install_root / "demo" / "index.js").read_bytes() == b"console.log('demo')\n"

    def test_install_failure_exits_nonzero(self, invoke, catalog_file):
        result = invoke("install", "Tool")

        assert result.exit_code == 1
        assert "Error downloading Tool" in result.stdout

    def test_unknown_entry(self, invoke, catalog_file):
        result = invoke("install", "Nope")

        assert result.exit_code == 1
        assert "No catalog entry named 'Nope'" in result.stdout

    def test_uninstall(self, invoke, catalog_file, install_root):
        invoke("install", "Demo")

        result = invoke("uninstall", "Demo", "--yes")

        assert result.exit_code == 0
        assert "Uninstalled Demo" in result.stdout
        assert not (install_root / "demo").exists()

    def test_uninstall_absent(self, invoke, catalog_file):
        result = invoke("uninstall", "Demo", "--yes")

        assert result.exit_code == 0
        assert "Nothing to uninstall." in result.stdout

    def test_update(self, invoke, catalog_file, install_root, hosting):
        invoke("install", "Demo")
        hosting.add_repo("org/demo", "main", {"index.js": b"v2"})

        result = invoke("update", "Demo", "--yes")

        assert result.exit_code == 0
        assert (install_root / "demo" / "index.js").read_bytes() == b"v2"
        assert not (install_root / "demo" / "src").exists()

    def test_start(self, invoke, catalog_file, install_root, launcher):
        invoke("install", "Demo")

        result = invoke("start", "Demo")

        assert result.exit_code == 0
        assert "Launched Demo" in result.stdout
        assert launcher.launched == [(["node", "index.js"], (install_root / "demo").resolve())]

    def test_start_not_installed(self, invoke, catalog_file, launcher):
        result = invoke("start", "Demo")

        assert result.exit_code == 1
        assert "Demo is not installed." in result.stdout
        assert launcher.launched == []

    def test_missing_catalog(self, invoke, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()

        result = invoke("list", root=empty)

        assert result.exit_code == 1
        assert "available.json not found" in result.stdout


class TestMenuEntryPoint:
    """Test running without a subcommand"""

    def test_no_command_opens_menu(self, invoke, catalog_file):
        result = invoke(input="5\n")

        assert result.exit_code == 0
        assert "Goodbye!" in result.stdout

    def test_menu_without_catalog_reports_and_returns(self, invoke, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()

        result = invoke(root=empty)

        assert result.exit_code == 0
        assert "available.json not found" in result.stdout

    def test_failed_self_update_still_opens_menu(self, invoke, catalog_file, monkeypatch, tmp_path):
        tool_root = tmp_path / "tool"
        tool_root.mkdir()
        (tool_root / "main.py").write_text("print(1)\n")
        monkeypatch.setenv("GITSHELF_SELF_UPDATE_ENABLED", "true")
        monkeypatch.setenv("GITSHELF_SELF_UPDATE_URL", "https://updates.example.com/tool")
        monkeypatch.setenv("GITSHELF_SELF_UPDATE_FILES", '["main.py"]')
        monkeypatch.setenv("GITSHELF_SELF_UPDATE_ROOT", str(tool_root))

        result = invoke(input="5\n")

        assert result.exit_code == 0
        assert "Update check failed" in result.stdout
        assert "Goodbye!" in result.stdout
        assert (tool_root / "main.py").read_text() == "print(1)\n"

    def test_self_update_without_root_is_rejected(self, invoke, catalog_file, monkeypatch):
        monkeypatch.setenv("GITSHELF_SELF_UPDATE_ENABLED", "true")

        result = invoke(input="5\n")

        assert result.exit_code == 1
        assert "Invalid configuration" in result.stdout


class TestConfigCommand:
    """Test config get/set/list and doctor"""

    def test_set_then_get(self, invoke, config_path):
        result = invoke("config", "set", "fetch_retries", "5")

        assert result.exit_code == 0
        assert ConfigManager(config_path).get("fetch_retries") == "5"
        assert invoke("config", "get", "fetch_retries").stdout.strip() == "5"

    def test_set_rejects_invalid_value(self, invoke, config_path):
        result = invoke("config", "set", "fetch_retries", "many")

        assert result.exit_code == 1
        assert not config_path.exists()

    def test_set_rejects_unknown_key(self, invoke):
        assert invoke("config", "set", "colour", "blue").exit_code == 1

    def test_token_is_masked(self, invoke, monkeypatch):
        monkeypatch.setenv("GITSHELF_GITHUB_TOKEN", "ghp_secret")

        result = invoke("config", "list")

        assert "ghp_secret" not in result.stdout
        assert "***" in result.stdout

    def test_doctor(self, invoke, catalog_file):
        result = invoke("doctor")

        assert result.exit_code == 0
        assert "2 entries" in result.stdout
        assert "requests left: 59" in result.stdout

    def test_doctor_reports_missing_catalog(self, invoke, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()

        result = invoke("doctor", root=empty)

        assert result.exit_code == 1


class ScriptedPrompter:
    """Answers menu prompts from a script"""

    def __init__(self, picks, confirms):
        self.picks = list(picks)
        self.confirms = list(confirms)
        self.shown = []

    def select(self, message, choices):
        self.shown.append((message, [title for title, _ in choices]))
        pick = self.picks.pop(0)
        if pick is None:
            return None
        for title, value in choices:
            if title.startswith(pick):
                return value
        raise AssertionError(f"{pick!r} not offered for {message!r}")

    def confirm(self, message, default=False):
        self.shown.append((message, None))
        return self.confirms.pop(0)


@pytest.fixture
def menu_context(settings, client, lifecycle, tmp_path):
    console = Console(file=io.StringIO(), width=200)
    return CLIContext(
        debug=False,
        settings=settings,
        config=ConfigManager(tmp_path / "config.yml"),
        formatter=OutputFormatter(console=console),
        console=console,
        _client=client,
        _lifecycle=lifecycle,
    )


def menu_output(cli_ctx):
    return cli_ctx.console.file.getvalue()


class TestInteractiveMenu:
    """Test InteractiveMenu"""

    def test_download_then_start(self, menu_context, catalog_file, install_root, launcher):
        prompter = ScriptedPrompter(
            picks=[MenuAction.DOWNLOAD.value, "Demo", MenuAction.START.value, "Demo"],
            confirms=[True, False],
        )

        assert InteractiveMenu(menu_context, prompter, clear_screen=False).run() is True

        assert (install_root / "demo" / "index.js").exists()
        assert launcher.launched[0][0] == ["node", "index.js"]
        # Only installed entries are offered for start, marked as installed
        start_choices = prompter.shown[4][1]
        assert len(start_choices) == 1
        assert start_choices[0].startswith("Demo") and "Installed" in start_choices[0]

    def test_installed_only_actions_with_nothing_installed(self, menu_context, catalog_file):
        prompter = ScriptedPrompter(picks=[MenuAction.UNINSTALL.value], confirms=[False])

        InteractiveMenu(menu_context, prompter, clear_screen=False).run()

        assert "No installed repos available to uninstall." in menu_output(menu_context)

    def test_uninstall_asks_first(self, menu_context, catalog_file, install_root):
        (install_root / "demo").mkdir()
        prompter = ScriptedPrompter(
            picks=[MenuAction.UNINSTALL.value, "Demo", MenuAction.UNINSTALL.value, "Demo"],
            confirms=[False, True, True, False],
        )

        InteractiveMenu(menu_context, prompter, clear_screen=False).run()

        questions = [message for message, choices in prompter.shown if choices is None]
        assert questions.count("Are you sure you want to uninstall Demo?") == 2
        assert not (install_root / "demo").exists()

    def test_download_asks_before_overwriting(self, menu_context, catalog_file, install_root):
        (install_root / "demo").mkdir()
        prompter = ScriptedPrompter(picks=[MenuAction.DOWNLOAD.value, "Demo"], confirms=[False, False])

        InteractiveMenu(menu_context, prompter, clear_screen=False).run()

        assert ("Demo already exists. Overwrite?", None) in prompter.shown
        assert list((install_root / "demo").iterdir()) == []

    def test_update_replaces_local_copy(self, menu_context, catalog_file, install_root, lifecycle, demo_entry, hosting):
        lifecycle.install(demo_entry)
        hosting.add_repo("org/demo", "main", {"index.js": b"v2"})
        prompter = ScriptedPrompter(picks=[MenuAction.UPDATE.value, "Demo"], confirms=[False])

        InteractiveMenu(menu_context, prompter, clear_screen=False).run()

        output = menu_output(menu_context)
        assert "Removed previous copy of Demo" in output
        assert "Downloaded Demo to demo" in output
        assert (install_root / "demo" / "index.js").read_bytes() == b"v2"
        assert not (install_root / "demo" / "src").exists()

    def test_failed_update_reports_entry_no_longer_installed(
        self, menu_context, catalog_file, install_root, lifecycle, demo_entry, hosting
    ):
        lifecycle.install(demo_entry)
        hosting.failures["index.js"] = 100
        prompter = ScriptedPrompter(picks=[MenuAction.UPDATE.value, "Demo"], confirms=[False])

        InteractiveMenu(menu_context, prompter, clear_screen=False).run()

        output = menu_output(menu_context)
        assert "Error downloading Demo" in output
        assert "Demo is no longer installed" in output
        assert not (install_root / "demo" / "index.js").exists()

    def test_catalog_reloaded_each_loop(self, menu_context, catalog_file):
        prompter = ScriptedPrompter(
            picks=[MenuAction.DOWNLOAD.value, None, MenuAction.DOWNLOAD.value, None],
            confirms=[True, False],
        )
        menu = InteractiveMenu(menu_context, prompter, clear_screen=False)
        original = prompter.select

        def select(message, choices):
            value = original(message, choices)
            if value == MenuAction.DOWNLOAD:
                catalog_file.write_text(json.dumps([{"name": "Fresh", "repo": "org/fresh", "folder": "fresh"}]))
            return value

        prompter.select = select
        menu.run()

        entry_lists = [choices for message, choices in prompter.shown if message.startswith("Select a repo")]
        assert entry_lists[0] == ["Demo", "Tool"]
        assert entry_lists[1] == ["Fresh"]

    def test_exit(self, menu_context, catalog_file):
        prompter = ScriptedPrompter(picks=[MenuAction.EXIT.value], confirms=[])

        assert InteractiveMenu(menu_context, prompter, clear_screen=False).run() is True
        assert "Goodbye!" in menu_output(menu_context)
