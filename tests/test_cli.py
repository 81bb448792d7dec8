from click.testing import CliRunner

import nvidiaupdater.cli as cli_module


class FakeUpdater:
    captured = {}

    def __init__(self, **kwargs):
        FakeUpdater.captured = kwargs

    def run(self):
        return 0


def test_cli_uses_config_and_allows_cli_override(tmp_path, monkeypatch):
    config_file = tmp_path / "update-nvidia.yml"
    config_file.write_text(
        "kernel_module: nvidia_test\n" "index_max_age_hours: 6\n" "mark_only: false\n",
        encoding="utf-8",
    )
    monkeypatch.setattr(cli_module, "NvidiaUpdater", FakeUpdater)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--config", str(config_file), "--mark-only", "-v"])

    assert result.exit_code == 0
    assert FakeUpdater.captured["mark_only"] is True
    assert FakeUpdater.captured["verbose"] is True
    assert FakeUpdater.captured["settings"].kernel_module == "nvidia_test"
    assert FakeUpdater.captured["settings"].index_max_age_seconds == 6 * 3600
    assert FakeUpdater.captured["config_path"] == str(config_file)


def test_cli_ignores_missing_default_config(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_module, "DEFAULT_CONFIG_PATH", str(tmp_path / "absent.yml"))
    monkeypatch.setattr(cli_module, "NvidiaUpdater", FakeUpdater)

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    assert FakeUpdater.captured["mark_only"] is False
    assert FakeUpdater.captured["config_path"] is None


def test_cli_help_lists_dependencies_and_does_nothing(monkeypatch):
    def fail_if_called(**_kwargs):
        raise AssertionError("help must not construct the updater")

    monkeypatch.setattr(cli_module, "NvidiaUpdater", fail_if_called)

    result = CliRunner().invoke(cli_module.main, ["-h"])

    assert result.exit_code == 0
    assert "--mark-only" in result.output
    assert "/usr/bin/apt-mark" in result.output
    assert "/sbin/reboot" in result.output


def test_cli_rejects_unknown_option(monkeypatch):
    monkeypatch.setattr(cli_module, "NvidiaUpdater", FakeUpdater)

    result = CliRunner().invoke(cli_module.main, ["--frobnicate"])

    assert result.exit_code == 2
    assert "No such option" in result.output


def test_cli_reports_invalid_config(tmp_path):
    config_file = tmp_path / "update-nvidia.yml"
    config_file.write_text("bogus: 1\n", encoding="utf-8")

    result = CliRunner().invoke(cli_module.main, ["--config", str(config_file)])

    assert result.exit_code == 1
    assert "Unknown configuration keys" in result.output


def test_cli_propagates_exit_code(tmp_path, monkeypatch):
    class FailingUpdater(FakeUpdater):
        def run(self):
            return 1

    monkeypatch.setattr(cli_module, "DEFAULT_CONFIG_PATH", str(tmp_path / "absent.yml"))
    monkeypatch.setattr(cli_module, "NvidiaUpdater", FailingUpdater)

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 1


def test_cli_rejects_quoted_mark_only(tmp_path, monkeypatch):
    config_file = tmp_path / "update-nvidia.yml"
    config_file.write_text('mark_only: "false"\n', encoding="utf-8")
    monkeypatch.setattr(cli_module, "NvidiaUpdater", FakeUpdater)
    FakeUpdater.captured = {}

    result = CliRunner().invoke(cli_module.main, ["--config", str(config_file)])

    assert result.exit_code == 1
    assert "must be true or false" in result.output
    assert FakeUpdater.captured == {}
