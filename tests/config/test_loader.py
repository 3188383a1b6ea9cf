"""
Tests for the YAML seed loader.

Seed files are written to tmp_path so each test controls its own data.
"""

from pathlib import Path

import pytest
import yaml

from currency_config.loader import (
    YamlSeedSource,
    compute_checksum,
    load_yaml_file,
    parse_seed_entries,
)
from currency_kernel.domain.currency_table import CurrencyTable
from currency_kernel.domain.seed import SeedSource
from currency_kernel.exceptions import SeedSourceError


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadYamlFile:

    def test_mapping_loaded(self, tmp_path):
        path = _write(tmp_path / "a.yaml", "usd:\n  iso_code: USD\n")
        assert load_yaml_file(path) == {"usd": {"iso_code": "USD"}}

    def test_empty_file_is_empty_mapping(self, tmp_path):
        assert load_yaml_file(_write(tmp_path / "empty.yaml", "")) == {}

    def test_list_top_level_rejected(self, tmp_path):
        path = _write(tmp_path / "list.yaml", "- usd\n- eur\n")
        with pytest.raises(SeedSourceError) as exc_info:
            load_yaml_file(path)
        assert exc_info.value.code == "SEED_SOURCE_ERROR"
        assert "list" in exc_info.value.reason

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml_file(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = _write(tmp_path / "bad.yaml", "usd: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_yaml_file(path)


class TestParseSeedEntries:

    def test_id_defaults_to_key(self):
        bags = parse_seed_entries({"usd": {"iso_code": "USD"}}, "test")
        assert bags == [{"iso_code": "USD", "id": "usd"}]

    def test_explicit_id_kept(self):
        bags = parse_seed_entries({"usd": {"id": "usx"}}, "test")
        assert bags[0]["id"] == "usx"

    def test_order_kept(self):
        bags = parse_seed_entries({"b": {}, "a": {}, "c": {}}, "test")
        assert [b["id"] for b in bags] == ["b", "a", "c"]

    def test_non_mapping_entry_rejected(self):
        with pytest.raises(SeedSourceError) as exc_info:
            parse_seed_entries({"usd": "dollar"}, "seeds.yaml")
        assert exc_info.value.source == "seeds.yaml"


class TestYamlSeedSource:

    def test_files_read_in_order(self, tmp_path):
        first = _write(tmp_path / "first.yaml", "usd:\n  priority: 1\n")
        second = _write(tmp_path / "second.yaml", "abc:\n  name: Custom\n")
        source = YamlSeedSource([first, second], name="two")

        assert isinstance(source, SeedSource)
        assert [bag["id"] for bag in source.load()] == ["usd", "abc"]

    def test_table_built_from_yaml(self, tmp_path):
        path = _write(
            tmp_path / "seed.yaml",
            'eur:\n  iso_code: EUR\n  iso_numeric: "978"\n  subunit_to_unit: 100\n  separator: ","\n',
        )
        table = CurrencyTable(YamlSeedSource([path]))
        eur = table.find_by_iso_numeric(978)
        assert eur == table.find("eur")
        assert eur.decimal_mark == ","
        assert eur.exponent == 2

    def test_reset_rereads_files(self, tmp_path):
        path = _write(tmp_path / "seed.yaml", "aaa:\n  name: First\n")
        table = CurrencyTable(YamlSeedSource([path]))
        _write(path, "aaa:\n  name: Second\n")
        table.reset()
        assert table.find("aaa").name == "Second"

    def test_checksum_stable(self, tmp_path):
        path = _write(tmp_path / "seed.yaml", "aaa:\n  name: First\n")
        source = YamlSeedSource([path])
        before = source.checksum()
        assert before == compute_checksum([{"name": "First", "id": "aaa"}])
        _write(path, "aaa:\n  name: Changed\n")
        assert source.checksum() != before

    def test_checksum_ignores_key_order(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})
