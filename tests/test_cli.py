"""Tests for the command line interface."""

import pytest
import yaml
from click.testing import CliRunner

from doc_assembly import cli as cli_module
from doc_assembly.cli import cli
from doc_assembly.config import DocAssemblyConfig
from doc_assembly.orchestrator import DocumentationOrchestrator
from tests._support.extractor import FakeExtractor


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.setattr(cli_module, "configure_logging", lambda **kwargs: None)
    monkeypatch.delenv("DOC_ASSEMBLY_CONFIG_FILE", raising=False)
    return CliRunner()


@pytest.fixture
def fake_orchestrator(monkeypatch, config):
    """Route commands through the fake extractor."""
    extractor = FakeExtractor()

    def _orchestrator(ctx):
        loaded = cli_module._load_config(ctx.obj["config_path"], ctx.obj["project_root"])
        loaded.external_helpers = config.external_helpers
        return DocumentationOrchestrator(loaded, extractor=extractor)

    monkeypatch.setattr(cli_module, "_orchestrator", _orchestrator)
    return extractor


class TestCli:
    """Tests for doc-assembly commands."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_config_prints_yaml(self, runner, project_root):
        result = runner.invoke(cli, ["-p", str(project_root), "config"])

        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["project_root"] == str(project_root)
        assert data["ignore"] == ["Polly", "MockRequest"]

    def test_config_file(self, runner, tmp_path):
        path = tmp_path / "assembly.yaml"
        path.write_text(yaml.safe_dump({"ignore": ["Foo"], "max_concurrency": 2}))

        result = runner.invoke(cli, ["-c", str(path), "config"])

        assert result.exit_code == 0
        assert yaml.safe_load(result.output)["max_concurrency"] == 2

    def test_helpers(self, runner, project_root, fake_orchestrator):
        result = runner.invoke(cli, ["-p", str(project_root), "helpers", "--only", "Foo"])

        assert result.exit_code == 0, result.output
        assert (project_root / "docs" / "helpers" / "Foo.md").exists()
        assert not (project_root / "docs" / "helpers" / "Appium.md").exists()

    def test_docs(self, runner, project_root, fake_orchestrator):
        result = runner.invoke(cli, ["-p", str(project_root), "docs"])

        assert result.exit_code == 0, result.output
        assert "Generation Summary" in result.output
        assert (project_root / "docs" / "plugins.md").exists()
        assert (project_root / "docs" / "helpers" / "Detox.md").exists()

    def test_build_lib_for_typings(self, runner, project_root, fake_orchestrator):
        result = runner.invoke(cli, ["-p", str(project_root), "build-lib", "--for-typings"])

        assert result.exit_code == 0, result.output
        assert "4 modules written" in result.output
        assert "LocatorOrString" in (project_root / "docs" / "build" / "Foo.js").read_text()

    def test_changelog(self, runner, project_root):
        result = runner.invoke(cli, ["-p", str(project_root), "changelog"])

        assert result.exit_code == 0, result.output
        assert (project_root / "docs" / "changelog.md").exists()

    def test_section(self, runner, project_root):
        (project_root / "README.md").write_text("Hello\n")

        result = runner.invoke(
            cli, ["-p", str(project_root), "section", "README.md", "--name", "intro", "--title", "Intro"]
        )

        assert result.exit_code == 0, result.output
        assert (project_root / "docs" / "intro.md").read_text().endswith("Hello\n")

    def test_unknown_module_exits_with_error(self, runner, project_root, fake_orchestrator):
        result = runner.invoke(cli, ["-p", str(project_root), "helpers", "--only", "Nope"])

        assert result.exit_code == 1
        assert "ConfigError" in result.output

    def test_extraction_failure_exits_with_error(self, runner, project_root, fake_orchestrator):
        fake_orchestrator.fail_on.add("Foo")

        result = runner.invoke(cli, ["-p", str(project_root), "helpers", "--only", "Foo"])

        assert result.exit_code == 1
        assert "[Foo]" in result.output
        assert "SyntaxError: Unexpected token" in result.output

    def test_load_config_defaults(self, monkeypatch):
        monkeypatch.delenv("DOC_ASSEMBLY_CONFIG_FILE", raising=False)

        config = cli_module._load_config(None, None)

        assert config.to_dict() == DocAssemblyConfig().to_dict()
