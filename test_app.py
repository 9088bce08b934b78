"""
Tests for the command line interface.
"""

import logging
import struct
import zipfile

import pytest

import app


def class_bytes(major: int, minor: int = 0) -> bytes:
    return b"\xca\xfe\xba\xbe" + struct.pack(">HH", minor, major) + b"\x00\x00"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    monkeypatch.delenv("JAVA_VERSION_FINDER_CONFIG", raising=False)
    monkeypatch.delenv("JAVA_VERSION_FINDER_LOG_LEVEL", raising=False)
    monkeypatch.delenv("JAVA_VERSION_FINDER_LOG_FILE", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def class_file(tmp_path):
    path = tmp_path / "Main.class"
    path.write_bytes(class_bytes(55))
    return str(path)


@pytest.fixture
def jar_file(tmp_path):
    path = tmp_path / "app.jar"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\nMulti-Release: true\n")
        zf.writestr("com/A.class", class_bytes(65))
        zf.writestr("META-INF/versions/17/com/A.class", class_bytes(61))
        zf.writestr("com/B.class", class_bytes(52))
    return str(path)


def test_no_arguments_prints_usage(capsys):
    assert app.main([]) == 0

    out = capsys.readouterr().out
    assert "minimum Java version required" in out
    assert "Usage:" in out


def test_class_and_jar(capsys, class_file, jar_file):
    assert app.main([class_file, jar_file]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        f"{class_file}: compiled Java class data, require Java 11 or above",
        f"{jar_file}: Java archive data (JAR), require Java 17 or above",
    ]


def test_failure_does_not_stop_later_inputs(capsys, class_file, jar_file, tmp_path):
    missing = str(tmp_path / "Missing.class")

    status = app.main(["notes.txt", missing, class_file, jar_file])

    captured = capsys.readouterr()
    assert status == 1
    assert len(captured.out.splitlines()) == 2
    assert "notes.txt: error: Got notes.txt. Expect a file ends with '.class' or '.jar'" in captured.err
    assert f"{missing}: error:" in captured.err


def test_invalid_configuration(capsys, class_file, tmp_path):
    config_path = tmp_path / "finder.json"
    config_path.write_text('{"min_runtime_version": 30}')

    assert app.main(["--config", str(config_path), class_file]) == 1
    assert "Configuration error" in capsys.readouterr().err


def test_run_uses_inspector_for_every_path(capsys):
    class FailingInspector:
        def __init__(self):
            self.seen = []

        def inspect(self, path):
            self.seen.append(path)
            raise app.JavaVersionError("boom", path=path)

    inspector = FailingInspector()

    assert app.run(["a.class", "b.jar"], inspector) == 1
    assert inspector.seen == ["a.class", "b.jar"]


def test_failure_is_reported_once(capsys):
    assert app.main(["notes.txt"]) == 1

    err_lines = [line for line in capsys.readouterr().err.splitlines() if "notes.txt" in line]
    assert err_lines == ["notes.txt: error: Got notes.txt. Expect a file ends with '.class' or '.jar'"]


def test_failure_goes_to_log_file(capsys, tmp_path):
    log_file = tmp_path / "finder.log"
    logger = logging.getLogger("JavaVersionFinder.ErrorHandler")
    try:
        assert app.main(["--log-file", str(log_file), "notes.txt"]) == 1
        for handler in logger.handlers:
            handler.flush()

        assert "notes.txt" in log_file.read_text()
        err_lines = [line for line in capsys.readouterr().err.splitlines() if "notes.txt" in line]
        assert len(err_lines) == 1
    finally:
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()


def test_configuration_not_an_object(capsys, class_file, tmp_path):
    config_path = tmp_path / "finder.json"
    config_path.write_text("[1, 2]")

    assert app.main(["--config", str(config_path), class_file]) == 1

    captured = capsys.readouterr()
    assert "Configuration error" in captured.err
    assert "expected a JSON object" in captured.err
    assert captured.out == ""


def test_help_does_not_print_default_ranges(capsys):
    with pytest.raises(SystemExit) as exc_info:
        app.main(["--help"])

    assert exc_info.value.code == 0
    out = capsys.readouterr().out
    assert "--config" in out
    assert "META-INF/versions" not in out
