import pytest

from context import ContextErrorKind, ContextManager, FileReader, FileReadError


def test_reads_utf8_text(tmp_path):
    path = tmp_path / "module.py"
    path.write_text("def f():\n    return 'é'\n", encoding="utf-8")

    assert FileReader().read(str(path)) == "def f():\n    return 'é'\n"


def test_missing_file(tmp_path):
    with pytest.raises(FileReadError, match="not found"):
        FileReader().read(str(tmp_path / "nope.py"))


def test_directory_is_not_a_file(tmp_path):
    with pytest.raises(FileReadError, match="not a file"):
        FileReader().read(str(tmp_path))


def test_binary_content_is_rejected(tmp_path):
    path = tmp_path / "image.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe\x00\x80")

    with pytest.raises(FileReadError, match="not a text file"):
        FileReader().read(str(path))


def test_oversized_file_is_rejected(tmp_path):
    path = tmp_path / "big.txt"
    path.write_text("x" * 2048)

    with pytest.raises(FileReadError, match="too large"):
        FileReader(max_file_size_mb=0.001).read(str(path))


def test_messages_are_prefixed_for_display(tmp_path):
    with pytest.raises(FileReadError) as excinfo:
        FileReader().read(str(tmp_path / "nope.py"))

    assert str(excinfo.value).startswith("Failed to read file:")


def test_manager_reports_reader_failures_as_results(tmp_path):
    good = tmp_path / "good.py"
    good.write_text("x = 1\n")
    manager = ContextManager(reader=FileReader())

    assert manager.add_file(str(good)).success is True
    failure = manager.add_file(str(tmp_path / "missing.py"))

    assert failure.kind == ContextErrorKind.READ_ERROR
    assert manager.get_files() == [str(good)]


def test_overlong_file_name_is_a_read_error(tmp_path):
    path = str(tmp_path / ("x" * 300))

    with pytest.raises(FileReadError, match="^Failed to read file:"):
        FileReader().read(path)

    manager = ContextManager(reader=FileReader())
    result = manager.add_file(path)

    assert result.kind == ContextErrorKind.READ_ERROR
    assert manager.get_files() == []


def test_manager_maps_os_errors_from_custom_readers():
    def broken_reader(path):
        raise OSError(5, "Input/output error")

    manager = ContextManager(reader=broken_reader)

    result = manager.add_file("/proj/a.py")

    assert result.kind == ContextErrorKind.READ_ERROR
    assert result.message.startswith("Failed to read file:")
    assert "Input/output error" in result.message
    assert manager.get_files() == []
