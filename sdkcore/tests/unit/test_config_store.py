"""
Tests for the account configuration store and its parsers
"""
import io

import pytest

from sdkcore.core import config_store as config_store_module
from sdkcore.core.config import reload_settings
from sdkcore.core.config_store import (
    ConfigLoadError,
    ConfigSnapshot,
    ConfigStore,
    get_config_store,
    parse_properties,
    parse_yaml,
)


class TestParseProperties:
    """Test Java .properties parsing"""

    def test_basic_separators(self):
        """Test '=', ':' and whitespace separators"""
        parsed = parse_properties("a=1\nb: 2\nc 3\nd = 4\n")
        assert parsed == {"a": "1", "b": "2", "c": "3", "d": "4"}

    def test_comments_and_blank_lines_skipped(self):
        """Test '#'/'!' comments and blank lines are ignored"""
        text = "# comment\n! also comment\n\n   \nacct1.UserName=user\n"
        assert parse_properties(text) == {"acct1.UserName": "user"}

    def test_empty_value(self):
        """Test a key with no value maps to empty string"""
        assert parse_properties("acct1.Subject=\n") == {"acct1.Subject": ""}

    def test_value_keeps_separators_after_first(self):
        """Test only the first separator splits the line"""
        parsed = parse_properties("service.EndPoint=https://api.example.com:443/a=b\n")
        assert parsed["service.EndPoint"] == "https://api.example.com:443/a=b"

    def test_line_continuation(self):
        """Test trailing backslash joins lines"""
        text = "acct1.Signature=abc\\\n    def\\\n    ghi\n"
        assert parse_properties(text) == {"acct1.Signature": "abcdefghi"}

    def test_escaped_backslash_is_not_continuation(self):
        """Test an escaped backslash at line end does not continue"""
        parsed = parse_properties("path=C:\\\\certs\\\\\nnext=1\n")
        assert parsed == {"path": "C:\\certs\\", "next": "1"}

    def test_escapes(self):
        """Test control, unicode and separator escapes"""
        parsed = parse_properties("a=tab\\there\nb=\\u0041BC\nkey\\=with\\:sep=v\n")
        assert parsed["a"] == "tab\there"
        assert parsed["b"] == "ABC"
        assert parsed["key=with:sep"] == "v"

    def test_malformed_unicode_escape(self):
        """Test bad \\uXXXX escape raises ConfigLoadError"""
        with pytest.raises(ConfigLoadError):
            parse_properties("a=\\u00G1\n")

    def test_later_duplicate_wins(self):
        """Test the last duplicate key wins"""
        assert parse_properties("a=1\na=2\n") == {"a": "2"}


class TestParseYaml:
    """Test YAML parsing and flattening"""

    def test_nested_mapping_flattened(self):
        """Test nested YAML becomes dotted keys"""
        text = "acct1:\n  UserName: user\n  Password: pw\nhttp:\n  Retry: 2\n"
        assert parse_yaml(text) == {
            "acct1.UserName": "user",
            "acct1.Password": "pw",
            "http.Retry": "2",
        }

    def test_null_and_bool_values(self):
        """Test null and bool YAML values are stringified"""
        parsed = parse_yaml("acct1:\n  Subject: null\nflags:\n  enabled: true\n")
        assert parsed["acct1.Subject"] == ""
        assert parsed["flags.enabled"] == "true"

    def test_empty_document(self):
        """Test empty YAML yields no keys"""
        assert parse_yaml("") == {}

    def test_non_mapping_rejected(self):
        """Test a YAML list at top level is rejected"""
        with pytest.raises(ConfigLoadError, match="mapping"):
            parse_yaml("- a\n- b\n")

    def test_invalid_yaml(self):
        """Test YAML syntax errors raise ConfigLoadError"""
        with pytest.raises(ConfigLoadError):
            parse_yaml("acct1: [unclosed\n")


class TestConfigSnapshot:
    """Test snapshot immutability"""

    def test_snapshot_is_read_only(self):
        """Test snapshots reject item assignment"""
        snapshot = ConfigSnapshot({"a": "1"}, version=1, source="test")
        with pytest.raises(TypeError):
            snapshot["a"] = "2"
        assert snapshot["a"] == "1"
        assert len(snapshot) == 1
        assert dict(snapshot) == {"a": "1"}

    def test_snapshot_copies_input(self):
        """Test snapshot is isolated from the source dict"""
        data = {"a": "1"}
        snapshot = ConfigSnapshot(data)
        data["a"] = "changed"
        assert snapshot["a"] == "1"


class TestConfigStore:
    """Test loading, publishing and reloading"""

    def test_starts_empty(self, store):
        """Test a new store holds an empty version-0 snapshot"""
        snapshot = store.current_snapshot()
        assert len(snapshot) == 0
        assert snapshot.version == 0

    def test_publish_coerces_values_and_bumps_version(self, store):
        """Test publish stringifies values and bumps the version"""
        first = store.publish({"acct1.UserName": "user", "http.Retry": 2, "x": None})
        second = store.publish({"acct1.UserName": "user"})

        assert first["http.Retry"] == "2"
        assert first["x"] == ""
        assert second.version == first.version + 1
        assert store.current_snapshot() is second

    def test_load_properties_path(self, store, resources_dir):
        """Test loading a .properties file"""
        snapshot = store.load(resources_dir / "sdk_config.properties")
        assert snapshot["acct1.UserName"] == "jb-us-seller_api1.paypal.com"
        assert snapshot["DefaultAccount"] == "acct1"
        assert store.path == resources_dir / "sdk_config.properties"

    def test_load_yaml_path(self, store, resources_dir):
        """Test loading a YAML file"""
        snapshot = store.load(str(resources_dir / "sdk_config.yaml"))
        assert snapshot["acct1.UserName"] == "yaml_seller"
        assert snapshot["acct1.Subject"] == ""
        assert snapshot["http.UseProxy"] == "false"

    def test_load_text_stream(self, store):
        """Test loading a text stream"""
        snapshot = store.load(io.StringIO("acct1.UserName=streamed\n"))
        assert snapshot["acct1.UserName"] == "streamed"
        assert store.path is None

    def test_load_binary_stream(self, store):
        """Test loading a UTF-8 binary stream"""
        snapshot = store.load(io.BytesIO("acct1.Password=pässword\n".encode("utf-8")))
        assert snapshot["acct1.Password"] == "pässword"

    def test_load_replaces_previous_snapshot(self, store):
        """Test load replaces instead of merging"""
        store.publish({"acct1.UserName": "old", "acct9.UserName": "gone"})
        snapshot = store.load(io.StringIO("acct1.UserName=new\n"))
        assert dict(snapshot) == {"acct1.UserName": "new"}

    def test_missing_file(self, store, tmp_path):
        """Test missing file raises FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            store.load(tmp_path / "nope.properties")

    def test_failed_load_keeps_previous_snapshot(self, store, tmp_path):
        """Test a parse failure leaves the old snapshot current"""
        previous = store.publish({"acct1.UserName": "kept"})
        bad = tmp_path / "bad.yaml"
        bad.write_text("acct1: [unclosed\n")

        with pytest.raises(ConfigLoadError):
            store.load(bad)
        assert store.current_snapshot() is previous

    def test_reload_reads_file_again(self, store, tmp_path):
        """Test reload picks up file changes"""
        config_file = tmp_path / "sdk_config.properties"
        config_file.write_text("acct1.UserName=before\n")
        first = store.load(config_file)

        config_file.write_text("acct1.UserName=after\n")
        second = store.reload()

        assert first["acct1.UserName"] == "before"
        assert second["acct1.UserName"] == "after"
        assert second is store.current_snapshot()

    def test_load_latin1_properties(self, store, tmp_path):
        """Test a non-UTF-8 .properties file is read as ISO-8859-1"""
        config_file = tmp_path / "sdk_config.properties"
        config_file.write_bytes("acct1.UserName=jürgen_api1\nacct1.Password=pässword\n".encode("latin-1"))

        snapshot = store.load(config_file)

        assert snapshot["acct1.UserName"] == "jürgen_api1"
        assert snapshot["acct1.Password"] == "pässword"

    def test_load_latin1_binary_stream(self, store):
        """Test a latin-1 binary stream is decoded like a .properties file"""
        snapshot = store.load(io.BytesIO("acct1.Subject=müller\n".encode("latin-1")))
        assert snapshot["acct1.Subject"] == "müller"

    def test_non_utf8_yaml_rejected(self, store, tmp_path):
        """Test a YAML file that is not UTF-8 raises ConfigLoadError"""
        previous = store.publish({"acct1.UserName": "kept"})
        config_file = tmp_path / "sdk_config.yaml"
        config_file.write_bytes("acct1:\n  UserName: jürgen\n".encode("latin-1"))

        with pytest.raises(ConfigLoadError, match="UTF-8"):
            store.load(config_file)
        assert store.current_snapshot() is previous

    def test_directory_path_raises_os_error(self, store, tmp_path):
        """Test loading a directory raises OSError and keeps the old snapshot"""
        previous = store.publish({"acct1.UserName": "kept"})

        with pytest.raises(OSError):
            store.load(tmp_path)
        assert store.current_snapshot() is previous

    def test_path_cleared_by_stream_load(self, store, tmp_path):
        """Test a stream load forgets the previous file so reload cannot revert it"""
        config_file = tmp_path / "sdk_config.properties"
        config_file.write_text("acct1.UserName=from_file\n")
        store.load(config_file)

        store.load(io.StringIO("acct1.UserName=from_stream\n"))

        assert store.path is None
        with pytest.raises(RuntimeError):
            store.reload()
        assert store.current_snapshot()["acct1.UserName"] == "from_stream"

    def test_path_cleared_by_publish(self, store, tmp_path):
        """Test publish() forgets the previous file"""
        config_file = tmp_path / "sdk_config.properties"
        config_file.write_text("acct1.UserName=from_file\n")
        store.load(config_file)

        store.publish({"acct1.UserName": "published"})

        assert store.path is None

    def test_reload_without_file(self, store):
        """Test reload needs a prior file load"""
        store.publish({"a": "1"})
        with pytest.raises(RuntimeError):
            store.reload()


class TestGlobalConfigStore:
    """Test the process-wide store built from settings"""

    def test_loads_configured_file(self, resources_dir, monkeypatch):
        """Test SDK_CONFIG_FILE is loaded into the shared store"""
        monkeypatch.setenv("SDK_CONFIG_FILE", str(resources_dir / "sdk_config.properties"))
        reload_settings()

        store = get_config_store()

        assert store is get_config_store()
        assert store.current_snapshot()["acct2.CertKey"] == "password"

    def test_empty_store_when_nothing_found(self, monkeypatch):
        """Test shared store starts empty without a config file"""
        monkeypatch.delenv("SDK_CONFIG_FILE", raising=False)
        monkeypatch.setattr(config_store_module, "get_config_path", lambda *args, **kwargs: None)
        reload_settings()

        store = get_config_store()

        assert len(store.current_snapshot()) == 0

    def test_configured_file_missing(self, tmp_path, monkeypatch):
        """Test a configured but missing file raises"""
        monkeypatch.setenv("SDK_CONFIG_FILE", str(tmp_path / "missing.properties"))
        reload_settings()

        with pytest.raises(FileNotFoundError):
            get_config_store()
