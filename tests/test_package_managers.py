"""
Tests for package manager detection, listing and upgrades
(global_up/package_managers.py).
"""

import json
from unittest.mock import patch

import pytest

from global_up.models import ManagerKind
from global_up.package_managers import (
    PACKAGE_MANAGERS,
    PackageManager,
    UpgradeError,
    detect_package_managers,
    get_package_manager,
    list_global_packages,
    parse_json_dependencies,
    parse_json_lines_list,
    upgrade_packages,
)
from global_up.runner import CommandError


NPM_OUTPUT = json.dumps({
    "name": "lib",
    "dependencies": {
        "corepack": {"version": "0.24.0", "overridden": False},
        "npm": {"version": "10.2.4"},
        "@vue/cli": {"version": "5.0.8"},
        "broken-link": {"resolved": "file:../broken"},
        "weird": "not-an-object",
    },
})

PNPM_OUTPUT = """\
Legend: production dependency, optional only, dev only

/home/user/.local/share/pnpm/global/5

dependencies:
├── typescript 5.3.3
├── @antfu/ni 0.21.12
└── local-tool link:../local-tool
"""

YARN_OUTPUT = "\n".join([
    json.dumps({"type": "activityStart", "data": {"id": 0}}),
    json.dumps({"type": "info", "data": "\"create-react-app@5.0.1\" has binaries:"}),
    json.dumps({"type": "list", "data": {"type": "bins-create-react-app", "items": ["create-react-app"]}}),
    "this line is not json",
    json.dumps({"type": "list", "data": {"type": "list", "body": ["create-react-app@5.0.1", "@nestjs/cli@10.3.0", "garbage"]}}),
    json.dumps({"type": "activityEnd", "data": {"id": 0}}),
])

BUN_OUTPUT = """\
/home/user/.bun/install/global node_modules (3)
├── prettier@3.1.1
├── @biomejs/biome@1.5.3
│   └── not a package line
└── vercel@33.0.1
"""


def _run_returning(outputs):
    """Fake run_command that answers by executable name."""
    def fake_run(argv, timeout=None):
        value = outputs.get(argv[0])
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise CommandError(argv, 127, f"{argv[0]}: not found")
        return value
    return fake_run


class TestPackageManagerRegistry:
    """Tests for the package manager table."""

    def test_one_entry_per_kind(self):
        """Test every ManagerKind has exactly one definition."""
        assert sorted(pm.kind for pm in PACKAGE_MANAGERS) == sorted(ManagerKind)

    def test_get_package_manager(self):
        """Test lookup by kind and by executable name."""
        assert get_package_manager(ManagerKind.PNPM).name == "pnpm"
        assert get_package_manager("bun").kind == ManagerKind.BUN

    def test_get_package_manager_unknown(self):
        with pytest.raises(ValueError):
            get_package_manager("cargo")

    @pytest.mark.parametrize("kind,expected", [
        (ManagerKind.NPM, ("npm", "install", "-g", "a@latest", "@s/b@latest")),
        (ManagerKind.PNPM, ("pnpm", "add", "-g", "a@latest", "@s/b@latest")),
        (ManagerKind.YARN, ("yarn", "global", "add", "a@latest", "@s/b@latest")),
        (ManagerKind.BUN, ("bun", "add", "-g", "a@latest", "@s/b@latest")),
    ])
    def test_upgrade_command(self, kind, expected):
        """Test batched upgrade commands request the latest tag."""
        assert get_package_manager(kind).get_upgrade_command(["a", "@s/b"]) == expected


class TestParsers:
    """Tests for per-manager listing parsers."""

    def test_npm_json(self):
        """Test npm entries without a version are skipped."""
        packages = get_package_manager(ManagerKind.NPM).parse(NPM_OUTPUT)
        assert [(p.name, p.version) for p in packages] == [
            ("corepack", "0.24.0"),
            ("npm", "10.2.4"),
            ("@vue/cli", "5.0.8"),
        ]
        assert all(p.manager == ManagerKind.NPM for p in packages)

    def test_npm_json_without_dependencies(self):
        assert parse_json_dependencies('{"name": "lib"}') == []
        assert parse_json_dependencies("[]") == []

    def test_npm_invalid_json_raises(self):
        with pytest.raises(ValueError):
            parse_json_dependencies("npm ERR! something")

    def test_pnpm_tree(self):
        """Test pnpm headers and link entries are dropped."""
        packages = get_package_manager(ManagerKind.PNPM).parse(PNPM_OUTPUT)
        assert [(p.name, p.version) for p in packages] == [
            ("typescript", "5.3.3"),
            ("@antfu/ni", "0.21.12"),
        ]
        assert all(p.manager == ManagerKind.PNPM for p in packages)

    def test_yarn_json_lines(self):
        """Test only "list" records with a body are used."""
        packages = get_package_manager(ManagerKind.YARN).parse(YARN_OUTPUT)
        assert [(p.name, p.version) for p in packages] == [
            ("create-react-app", "5.0.1"),
            ("@nestjs/cli", "10.3.0"),
        ]
        assert all(p.manager == ManagerKind.YARN for p in packages)

    def test_yarn_empty(self):
        assert parse_json_lines_list("") == []

    def test_bun_tree(self):
        """Test bun tree glyphs are stripped and scoped names kept."""
        packages = get_package_manager(ManagerKind.BUN).parse(BUN_OUTPUT)
        assert [(p.name, p.version) for p in packages] == [
            ("prettier", "3.1.1"),
            ("@biomejs/biome", "1.5.3"),
            ("vercel", "33.0.1"),
        ]
        assert all(p.manager == ManagerKind.BUN for p in packages)

    def test_custom_manager_variant(self):
        """Test a new variant only needs its own table entry."""
        pm = PackageManager(
            kind=ManagerKind.NPM,
            check_command=("true",),
            list_command=("true",),
            upgrade_command=("true",),
            parse_listing=lambda output: [("x", "1.0.0")],
        )
        assert pm.parse("anything")[0].name == "x"


class TestDetectPackageManagers:
    """Tests for detection."""

    @patch("global_up.package_managers.run_command")
    def test_two_of_four(self, mock_run):
        """Test exactly the managers whose probe succeeds are returned."""
        mock_run.side_effect = _run_returning({"npm": "10.2.4\n", "bun": "1.0.25\n"})

        assert detect_package_managers() == {ManagerKind.NPM, ManagerKind.BUN}

    @patch("global_up.package_managers.run_command")
    def test_probes_every_manager(self, mock_run):
        """Test a failing probe does not stop the others."""
        mock_run.side_effect = _run_returning({"yarn": "1.22.19\n"})

        assert detect_package_managers() == {ManagerKind.YARN}
        probed = sorted(call.args[0][0] for call in mock_run.call_args_list)
        assert probed == ["bun", "npm", "pnpm", "yarn"]

    @patch("global_up.package_managers.run_command")
    def test_none_found(self, mock_run):
        mock_run.side_effect = _run_returning({})

        assert detect_package_managers() == set()

    @patch("global_up.package_managers.run_command")
    def test_probe_os_error_is_absent(self, mock_run):
        """Test unexpected OS errors count as not present."""
        mock_run.side_effect = _run_returning({"npm": OSError("exec format error"), "pnpm": "8.15.0"})

        assert detect_package_managers() == {ManagerKind.PNPM}


class TestListGlobalPackages:
    """Tests for listing."""

    @patch("global_up.package_managers.run_command")
    def test_runs_list_command(self, mock_run):
        mock_run.return_value = BUN_OUTPUT

        packages = list_global_packages(ManagerKind.BUN, timeout=30)

        assert len(packages) == 3
        mock_run.assert_called_once_with(("bun", "pm", "ls", "-g"), timeout=30)

    @patch("global_up.package_managers.run_command")
    def test_command_failure_is_empty(self, mock_run):
        """Test a failing list command yields no packages."""
        mock_run.side_effect = CommandError(("npm", "list"), 1, "npm ERR! ELSPROBLEMS")

        assert list_global_packages(ManagerKind.NPM) == []

    @patch("global_up.package_managers.run_command")
    def test_unparseable_output_is_empty(self, mock_run):
        mock_run.return_value = "not json at all"

        assert list_global_packages(ManagerKind.NPM) == []


class TestUpgradePackages:
    """Tests for batched upgrades."""

    @patch("global_up.package_managers.run_command")
    def test_single_batched_command(self, mock_run):
        """Test all names go into one command."""
        mock_run.return_value = ""

        upgrade_packages(ManagerKind.PNPM, ["typescript", "@antfu/ni"])

        mock_run.assert_called_once_with(
            ("pnpm", "add", "-g", "typescript@latest", "@antfu/ni@latest"),
            timeout=None,
        )

    @patch("global_up.package_managers.run_command")
    def test_empty_is_noop(self, mock_run):
        """Test no names means no process."""
        upgrade_packages(ManagerKind.NPM, [])

        mock_run.assert_not_called()

    @patch("global_up.package_managers.run_command")
    def test_failure_propagates(self, mock_run):
        """Test upgrade failures raise with the manager and detail."""
        mock_run.side_effect = CommandError(("yarn",), 1, "error Couldn't find package")

        with pytest.raises(UpgradeError) as exc_info:
            upgrade_packages(ManagerKind.YARN, ["nope"])

        assert exc_info.value.manager == ManagerKind.YARN
        assert "Couldn't find package" in exc_info.value.detail
        assert str(exc_info.value).startswith("yarn: ")
