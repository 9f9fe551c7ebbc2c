"""Tests for kbwiki.sections (lookup, link traversal, section filters)."""

import pytest

from kbwiki.errors import AmbiguousSectionError, SectionNotFoundError
from kbwiki.models import Index, IndexSection, SectionFilterOptions, SectionLinks
from kbwiki.sections import (
    filter_sections,
    find_section,
    normalize_link_types,
    resolve_linked_sections,
)


def _index() -> Index:
    return Index(
        sections=[
            IndexSection(title="General", slug=""),
            IndexSection(
                title="Guide",
                slug="guide",
                tags=["docs", "basics"],
                links=SectionLinks(depends_on=["api", "core"], related_to=["API", "faq"]),
            ),
            IndexSection(title="API Reference", slug="api", tags=["docs", "api"]),
            IndexSection(
                title="Core", slug="core", links=SectionLinks(depends_on=["guide"])
            ),
            IndexSection(title="FAQ", slug="faq", links=SectionLinks(related_to=["guide"])),
        ]
    )


class TestFindSection:
    """Tests for find_section precedence."""

    def test_empty_key_finds_root(self):
        section, position = find_section(_index(), "")
        assert section.title == "General"
        assert position == 0

    def test_blank_key_is_treated_as_empty(self):
        assert find_section(_index(), "   ")[1] == 0

    def test_empty_key_without_root(self):
        index = Index(sections=[IndexSection(title="A", slug="a")])
        with pytest.raises(SectionNotFoundError):
            find_section(index, "")

    def test_empty_key_with_two_roots(self):
        index = Index(sections=[IndexSection(title="A", slug=""), IndexSection(title="B", slug=" ")])
        with pytest.raises(AmbiguousSectionError, match="multiple sections with empty slug"):
            find_section(index, "")

    def test_slug_match_is_case_insensitive(self):
        section, position = find_section(_index(), "GUIDE")
        assert section.slug == "guide"
        assert position == 1

    def test_normalized_slug_match(self):
        section, _ = find_section(_index(), "./guide/")
        assert section.slug == "guide"

    def test_title_match(self):
        section, _ = find_section(_index(), "api reference")
        assert section.slug == "api"

    def test_ambiguous_title(self):
        index = Index(
            sections=[
                IndexSection(title="Notes", slug="notes-a"),
                IndexSection(title="notes", slug="notes-b"),
            ]
        )
        with pytest.raises(AmbiguousSectionError) as exc_info:
            find_section(index, "Notes")
        assert exc_info.value.details["candidates"] == ["notes-a", "notes-b"]

    def test_slug_match_wins_over_other_sections_title(self):
        """A key that is one section's slug and another's title resolves by slug."""
        index = Index(
            sections=[
                IndexSection(title="Setup", slug="install"),
                IndexSection(title="Install", slug="setup"),
            ]
        )
        section, position = find_section(index, "install")
        assert section.title == "Setup"
        assert position == 0

    def test_unknown_key(self):
        with pytest.raises(SectionNotFoundError, match="nope"):
            find_section(_index(), "nope")

    def test_traversal_key_falls_through_to_titles(self):
        index = Index(sections=[IndexSection(title="../up", slug="x")])
        section, _ = find_section(index, "../up")
        assert section.slug == "x"


class TestNormalizeLinkTypes:
    def test_defaults_to_both(self):
        assert normalize_link_types(None) == ["depends_on", "related_to"]
        assert normalize_link_types([]) == ["depends_on", "related_to"]

    def test_cleans_dedupes_and_sorts(self):
        assert normalize_link_types([" Related_To", "depends_on", "related_to", ""]) == [
            "depends_on",
            "related_to",
        ]


class TestResolveLinkedSections:
    """Tests for one-level link expansion."""

    def test_follows_both_types_and_dedupes(self):
        index = _index()
        guide, _ = find_section(index, "guide")

        linked = resolve_linked_sections(index, guide)

        # "API" (related_to) resolves to the same section as "api" (depends_on)
        assert [s.slug for s in linked] == ["api", "core", "faq"]

    def test_single_link_type(self):
        index = _index()
        guide, _ = find_section(index, "guide")

        linked = resolve_linked_sections(index, guide, ["related_to"])

        assert [s.slug for s in linked] == ["api", "faq"]

    def test_not_transitive(self):
        index = _index()
        faq, _ = find_section(index, "faq")

        linked = resolve_linked_sections(index, faq)

        # faq -> guide only; guide's own links are not followed
        assert [s.slug for s in linked] == ["guide"]

    def test_unknown_link_type_is_ignored(self):
        index = _index()
        guide, _ = find_section(index, "guide")
        assert resolve_linked_sections(index, guide, ["mentions"]) == []

    def test_blank_targets_are_skipped(self):
        index = _index()
        section = IndexSection(title="X", slug="x", links=SectionLinks(depends_on=["", "  "]))
        assert resolve_linked_sections(index, section) == []

    def test_missing_target_fails(self):
        index = _index()
        section = IndexSection(
            title="X", slug="x", links=SectionLinks(depends_on=["api", "missing"])
        )

        with pytest.raises(SectionNotFoundError) as exc_info:
            resolve_linked_sections(index, section)

        assert exc_info.value.details == {"section": "missing", "link_type": "depends_on"}
        assert "depends_on" in exc_info.value.message

    def test_ambiguous_target_names_link_type(self):
        index = Index(
            sections=[
                IndexSection(title="Dup", slug="a"),
                IndexSection(title="Dup", slug="b"),
            ]
        )
        section = IndexSection(title="X", slug="x", links=SectionLinks(related_to=["dup"]))

        with pytest.raises(AmbiguousSectionError) as exc_info:
            resolve_linked_sections(index, section)

        assert exc_info.value.details["link_type"] == "related_to"


class TestFilterSections:
    """Tests for filter_sections."""

    def test_no_filters_returns_same_list(self):
        sections = _index().sections
        assert filter_sections(sections, SectionFilterOptions()) is sections

    def test_tags_any(self):
        result = filter_sections(_index().sections, SectionFilterOptions(tags=["API", "basics"]))
        assert [s.slug for s in result] == ["guide", "api"]

    def test_tags_all(self):
        result = filter_sections(
            _index().sections, SectionFilterOptions(tags=["docs", "api"], tag_mode="all")
        )
        assert [s.slug for s in result] == ["api"]

    def test_link_type_only(self):
        result = filter_sections(_index().sections, SectionFilterOptions(link_type="depends_on"))
        assert [s.slug for s in result] == ["guide", "core"]

    def test_link_type_and_target(self):
        result = filter_sections(
            _index().sections, SectionFilterOptions(link_type="related_to", link_target="FAQ")
        )
        assert [s.slug for s in result] == ["guide"]

    def test_link_target_any_type(self):
        result = filter_sections(_index().sections, SectionFilterOptions(link_target="guide"))
        assert [s.slug for s in result] == ["core", "faq"]
