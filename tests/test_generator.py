"""Tests for kbwiki.generator (index generation from pages)."""

import pytest

from kbwiki.cancel import CancelToken, OperationCanceled
from kbwiki.errors import DuplicateSlugError
from kbwiki.generator import generate_index
from kbwiki.index import dump_index
from kbwiki.models import Page


def _scenario_pages() -> list[Page]:
    return [
        Page(title="Home", slug="home"),
        Page(title="Intro", slug="guide/intro", section="Guide", order=1),
        Page(title="Draft", slug="guide/draft", section="Guide", order=2, status="draft"),
    ]


class TestGenerateIndex:
    """Tests for grouping and titling."""

    def test_scenario(self):
        index = generate_index(_scenario_pages())

        assert index.index_version == 1
        assert [(s.slug, s.title, s.pages) for s in index.sections] == [
            ("", "General", ["home"]),
            ("guide", "Guide", ["intro", "draft"]),
        ]

    def test_title_derived_from_key_when_unlabelled(self):
        index = generate_index([Page(title="Q", slug="getting-started/q")])
        assert index.sections[0].title == "Getting Started"

    def test_section_label_overrides_derived_title(self):
        index = generate_index(
            [
                Page(title="A", slug="ops/a"),
                Page(title="B", slug="ops/b", section="Operations"),
            ]
        )
        assert index.sections[0].title == "Operations"

    def test_conflicting_labels_pick_the_first_in_page_order(self):
        pages = [
            Page(title="Setup", slug="guide/setup", section="User Guide"),
            Page(title="Intro", slug="guide/intro", section="Guide"),
        ]

        forward = dump_index(generate_index(pages))
        backward = dump_index(generate_index(list(reversed(pages))))

        assert forward == backward
        assert generate_index(pages).sections[0].title == "Guide"

    def test_nested_slugs_keep_their_relative_path(self):
        index = generate_index([Page(title="Deep", slug="guide/advanced/deep")])
        assert index.sections[0].slug == "guide"
        assert index.sections[0].pages == ["advanced/deep"]

    def test_empty_slugs_are_ignored(self):
        index = generate_index([Page(title="Loose"), Page(title="Home", slug="home")])
        assert [s.pages for s in index.sections] == [["home"]]

    def test_no_pages(self):
        assert generate_index([]).sections == []

    def test_duplicate_slugs_rejected(self):
        with pytest.raises(DuplicateSlugError, match="guide/a"):
            generate_index([Page(slug="guide/a"), Page(slug="guide/a")])

    def test_cancelled(self):
        token = CancelToken()
        token.cancel()
        with pytest.raises(OperationCanceled):
            generate_index(_scenario_pages(), cancel=token)


class TestGeneratedOrdering:
    """Tests for the total, deterministic sort order."""

    def test_root_section_first_then_by_title_then_slug(self):
        pages = [
            Page(title="z", slug="zeta/z"),
            Page(title="b", slug="beta-two/b", section="Beta"),
            Page(title="b", slug="beta-one/b", section="beta"),
            Page(title="r", slug="root-page"),
            Page(title="a", slug="alpha/a"),
        ]

        index = generate_index(pages)

        assert [s.slug for s in index.sections] == ["", "alpha", "beta-one", "beta-two", "zeta"]

    def test_ordered_pages_before_unordered(self):
        pages = [
            Page(title="Aardvark", slug="s/aardvark"),
            Page(title="Zebra", slug="s/zebra", order=5),
            Page(title="Middle", slug="s/middle", order=1),
        ]

        index = generate_index(pages)

        assert index.sections[0].pages == ["middle", "zebra", "aardvark"]

    def test_equal_order_falls_back_to_title_then_slug(self):
        pages = [
            Page(title="beta", slug="s/y", order=1),
            Page(title="Alpha", slug="s/x", order=1),
            Page(title="same", slug="s/b"),
            Page(title="Same", slug="s/a"),
        ]

        index = generate_index(pages)

        assert index.sections[0].pages == ["x", "y", "a", "b"]

    def test_negative_order_sorts_before_positive(self):
        pages = [Page(title="P", slug="p", order=1), Page(title="N", slug="n", order=-1)]
        assert generate_index(pages).sections[0].pages == ["n", "p"]

    def test_input_order_does_not_matter(self):
        pages = _scenario_pages() + [
            Page(title="Auth", slug="api/auth"),
            Page(title="Users", slug="api/users", order=3),
        ]

        forward = dump_index(generate_index(pages))
        backward = dump_index(generate_index(list(reversed(pages))))

        assert forward == backward
        assert dump_index(generate_index(pages)) == forward
