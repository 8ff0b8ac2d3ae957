"""注册表查询单元测试"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sbughetti.core.dep.provider import (
    DocumentConfigProvider,
    MappingConfigProvider,
    package_dependencies,
    package_field,
    parse_path,
    read_record,
    root_dependencies,
)
from sbughetti.core.exceptions import ConfigLookupError

_DOC = {
    "dependencies": ["prelude", "console"],
    "packages": {
        "prelude": {
            "repo": "https://github.com/purescript/purescript-prelude.git",
            "version": "v4.1.0",
            "dependencies": [],
        },
        "console": {
            "repo": "https://github.com/purescript/purescript-console.git",
            "version": "v4.2.0",
            "dependencies": ["effect", "prelude"],
        },
        "web.dom": {"repo": "r", "version": "v1", "dependencies": ["prelude"]},
        "bad": {"repo": "r", "version": 3, "dependencies": "prelude"},
    },
}


class TestParsePath:
    @pytest.mark.parametrize(("expr", "keys", "as_list"), [
        ("dependencies[]", ["dependencies"], True),
        (".dependencies[]", ["dependencies"], True),
        ("packages.prelude.version", ["packages", "prelude", "version"], False),
        ('packages."web.dom".repo', ["packages", "web.dom", "repo"], False),
        ('.packages."purescript-foo".dependencies[]',
         ["packages", "purescript-foo", "dependencies"], True),
    ])
    def test_valid(self, expr: str, keys: list[str], as_list: bool) -> None:
        assert parse_path(expr) == (keys, as_list)

    @pytest.mark.parametrize("expr", ["", "[]", "packages..x", "packages.", "a[0]"])
    def test_invalid(self, expr: str) -> None:
        with pytest.raises(ConfigLookupError):
            parse_path(expr)


class TestMappingProvider:
    def test_query_string_and_list(self) -> None:
        p = MappingConfigProvider(_DOC)
        assert p.query("packages.prelude.version") == "v4.1.0"
        assert p.query("packages.console.dependencies[]") == ["effect", "prelude"]
        assert p.query("dependencies[]") == ["prelude", "console"]

    def test_quoted_key_with_dot(self) -> None:
        p = MappingConfigProvider(_DOC)
        assert p.query('packages."web.dom".dependencies[]') == ["prelude"]

    def test_missing_entry_raises(self) -> None:
        p = MappingConfigProvider(_DOC)
        with pytest.raises(ConfigLookupError, match="没有条目: packages.nope"):
            p.query("packages.nope.version")

    def test_wrong_shape_raises(self) -> None:
        p = MappingConfigProvider(_DOC)
        with pytest.raises(ConfigLookupError, match="不是字符串"):
            p.query("packages.bad.version")
        with pytest.raises(ConfigLookupError, match="不是字符串列表"):
            p.query("packages.bad.dependencies[]")

    def test_returned_list_is_a_copy(self) -> None:
        p = MappingConfigProvider(_DOC)
        deps = p.query("packages.console.dependencies[]")
        assert isinstance(deps, list)
        deps.append("mutated")
        assert p.query("packages.console.dependencies[]") == ["effect", "prelude"]


class TestDocumentProvider:
    def test_json_document(self, tmp_path: Path) -> None:
        doc = tmp_path / "spacchetti.json"
        doc.write_text(json.dumps(_DOC), encoding="utf-8")
        p = DocumentConfigProvider(doc)
        assert p.query("packages.console.version") == "v4.2.0"

    def test_yaml_document(self, tmp_path: Path) -> None:
        doc = tmp_path / "registry.yml"
        doc.write_text(
            "dependencies: [prelude]\n"
            "packages:\n"
            "  prelude:\n"
            "    repo: https://example.com/prelude.git\n"
            "    version: v4.1.0\n"
            "    dependencies: []\n",
            encoding="utf-8",
        )
        p = DocumentConfigProvider(doc)
        assert p.query("dependencies[]") == ["prelude"]
        assert p.query("packages.prelude.dependencies[]") == []

    def test_missing_document_raises(self, tmp_path: Path) -> None:
        p = DocumentConfigProvider(tmp_path / "nope.json")
        with pytest.raises(ConfigLookupError, match="注册表文档不存在"):
            p.query("dependencies[]")

    def test_malformed_document_raises(self, tmp_path: Path) -> None:
        doc = tmp_path / "broken.json"
        doc.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigLookupError, match="格式错误"):
            DocumentConfigProvider(doc).query("dependencies[]")

    def test_document_loaded_once(self, tmp_path: Path) -> None:
        doc = tmp_path / "spacchetti.json"
        doc.write_text(json.dumps(_DOC), encoding="utf-8")
        p = DocumentConfigProvider(doc)
        p.query("dependencies[]")
        doc.unlink()
        assert p.query("packages.prelude.version") == "v4.1.0"


class TestHelpers:
    def test_package_field_and_dependencies(self) -> None:
        p = MappingConfigProvider(_DOC)
        assert package_field(p, "prelude", "repo").endswith("purescript-prelude.git")
        assert package_dependencies(p, "web.dom") == ["prelude"]
        assert root_dependencies(p) == ["prelude", "console"]

    def test_read_record(self) -> None:
        rec = read_record(MappingConfigProvider(_DOC), "console")
        assert rec.version == "v4.2.0"
        assert rec.dependencies == ("effect", "prelude")

    def test_read_record_without_dependencies(self) -> None:
        rec = read_record(MappingConfigProvider(_DOC), "console", with_dependencies=False)
        assert rec.dependencies == ()

    def test_name_with_quote_rejected(self) -> None:
        with pytest.raises(ConfigLookupError, match="非法字符"):
            package_field(MappingConfigProvider(_DOC), 'a"b', "repo")
