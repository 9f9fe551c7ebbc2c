"""Tests for the index model and kbwiki.index persistence."""

from pathlib import Path

import pytest
import yaml

from kbwiki.cancel import CancelToken, OperationCanceled
from kbwiki.errors import IndexNotFoundError, IndexParseError
from kbwiki.index import dump_index, load_index, parse_index, save_index
from kbwiki.models import Index, IndexSection, SectionLinks


def _index() -> Index:
    return Index(
        sections=[
            IndexSection(title="General", slug="", pages=["home"]),
            IndexSection(
                title="Guide",
                slug="guide",
                order=1,
                tags=["docs"],
                links=SectionLinks(depends_on=["api"]),
                pages=["intro", "setup"],
            ),
            IndexSection(title="API", slug="api", pages=["auth"]),
        ]
    )


class TestIndexSection:
    """Tests for IndexSection.list_pages and Index.remove_slug."""

    def test_list_pages_joins_section_slug(self):
        section = IndexSection(title="Guide", slug="guide", pages=["intro", "deep/page"])
        assert section.list_pages() == ["guide/intro", "guide/deep/page"]

    def test_list_pages_root_section_is_verbatim(self):
        section = IndexSection(title="General", slug="", pages=["home", "about"])
        assert section.list_pages() == ["home", "about"]

    def test_list_pages_trailing_slash(self):
        section = IndexSection(title="Guide", slug="guide/", pages=["intro"])
        assert section.list_pages() == ["guide/intro"]

    def test_key_prefers_slug(self):
        assert IndexSection(title="Guide", slug="Guide-Slug").key == "guide-slug"
        assert IndexSection(title="Root Title", slug="").key == "root title"

    def test_remove_slug_from_section(self):
        index = _index()
        assert index.remove_slug("guide/intro") is True
        assert index.sections[1].pages == ["setup"]

    def test_remove_slug_from_root_section(self):
        index = _index()
        assert index.remove_slug("home") is True
        assert index.sections[0].pages == []

    def test_remove_unknown_slug(self):
        index = _index()
        assert index.remove_slug("guide/missing") is False
        assert index.remove_slug("") is False
        assert index == _index()


class TestIndexVersion:
    @pytest.mark.parametrize("raw", [None, 0, -3])
    def test_non_positive_version_normalizes_to_one(self, raw):
        assert Index.model_validate({"index_version": raw}).index_version == 1

    def test_positive_version_is_kept(self):
        assert Index(index_version=2).index_version == 2


class TestDumpIndex:
    """Tests for deterministic index serialization."""

    def test_key_order_and_omitted_fields(self):
        text = dump_index(_index())
        data = yaml.safe_load(text)

        assert list(data) == ["index_version", "sections"]
        assert list(data["sections"][0]) == ["title", "slug", "order", "pages"]
        assert list(data["sections"][1]) == ["title", "slug", "order", "tags", "links", "pages"]
        assert data["sections"][1]["links"] == {"depends_on": ["api"]}

    def test_dump_is_stable(self):
        assert dump_index(_index()) == dump_index(_index())

    def test_version_reset_after_construction_is_normalized_on_save(self):
        index = _index()
        index.index_version = 0

        assert yaml.safe_load(dump_index(index))["index_version"] == 1


class TestLoadSaveIndex:
    """Tests for load_index / save_index."""

    def test_round_trip(self, tmp_path: Path):
        path = tmp_path / "_index.yaml"
        save_index(path, _index())

        assert load_index(path) == _index()

    def test_missing_version_normalized_on_load(self, tmp_path: Path):
        path = tmp_path / "_index.yaml"
        path.write_text("sections:\n- title: General\n  slug: ''\n  pages: [home]\n")

        index = load_index(path)

        assert index.index_version == 1
        assert index.sections[0].pages == ["home"]

    def test_section_order_is_kept(self, tmp_path: Path):
        path = tmp_path / "_index.yaml"
        path.write_text(
            "index_version: 1\n"
            "sections:\n"
            "- {title: Zeta, slug: zeta, pages: []}\n"
            "- {title: Alpha, slug: alpha, pages: []}\n"
        )

        index = load_index(path)

        assert [s.slug for s in index.sections] == ["zeta", "alpha"]

    def test_empty_file_is_an_empty_index(self, tmp_path: Path):
        path = tmp_path / "_index.yaml"
        path.write_text("")
        assert load_index(path) == Index()

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(IndexNotFoundError):
            load_index(tmp_path / "_index.yaml")

    def test_malformed_yaml(self, tmp_path: Path):
        path = tmp_path / "_index.yaml"
        path.write_text("sections: [unclosed\n")
        with pytest.raises(IndexParseError):
            load_index(path)

    def test_wrong_shape(self, tmp_path: Path):
        path = tmp_path / "_index.yaml"
        path.write_text("sections: 12\n")
        with pytest.raises(IndexParseError):
            load_index(path)

    def test_parse_index_rejects_scalar_document(self):
        with pytest.raises(IndexParseError, match="expected a mapping"):
            parse_index("just text")

    def test_save_creates_parent_directories(self, tmp_path: Path):
        path = tmp_path / "out" / "nested" / "_index.yaml"
        save_index(path, _index())
        assert path.exists()

    def test_cancelled_load(self, tmp_path: Path):
        path = tmp_path / "_index.yaml"
        save_index(path, _index())
        token = CancelToken()
        token.cancel()

        with pytest.raises(OperationCanceled):
            load_index(path, cancel=token)

    def test_cancelled_save_writes_nothing(self, tmp_path: Path):
        path = tmp_path / "_index.yaml"
        token = CancelToken()
        token.cancel()

        with pytest.raises(OperationCanceled):
            save_index(path, _index(), cancel=token)
        assert not path.exists()
