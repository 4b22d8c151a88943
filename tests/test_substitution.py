"""Tests for fragment discovery and the substitution engine."""

import pytest

from doc_assembly.errors import ConfigError, SourceReadError
from doc_assembly.fragments import discover_fragments
from doc_assembly.models import Fragment, FragmentKind, Module
from doc_assembly.substitution import (
    SubstitutionEngine,
    format_inline_partial,
    format_shared_block,
)


def partial(name, body):
    return Fragment(name=name, kind=FragmentKind.INLINE_PARTIAL, body=body)


def shared(name, body):
    return Fragment(name=name, kind=FragmentKind.SHARED_BLOCK, body=body)


# =============================================================================
# Fragment discovery
# =============================================================================


class TestDiscoverFragments:
    """Tests for discover_fragments."""

    def test_missing_directory_yields_nothing(self, tmp_path):
        """A missing fragment directory is not an error."""
        assert discover_fragments(tmp_path / "nope", FragmentKind.INLINE_PARTIAL) == []

    def test_none_directory_yields_nothing(self):
        assert discover_fragments(None, FragmentKind.SHARED_BLOCK) == []

    def test_names_are_file_stems_in_sorted_order(self, tmp_path):
        """Fragments are named by file stem and enumerated by name."""
        (tmp_path / "b.mustache").write_text("B")
        (tmp_path / "a.mustache").write_text("A")
        (tmp_path / "notes.txt").write_text("ignored")

        fragments = discover_fragments(tmp_path, FragmentKind.INLINE_PARTIAL)

        assert [f.name for f in fragments] == ["a", "b"]
        assert [f.body for f in fragments] == ["A", "B"]
        assert all(f.kind is FragmentKind.INLINE_PARTIAL for f in fragments)

    def test_custom_extension(self, tmp_path):
        (tmp_path / "a.md").write_text("A")
        (tmp_path / "b.mustache").write_text("B")

        fragments = discover_fragments(tmp_path, FragmentKind.SHARED_BLOCK, extension=".md")

        assert [f.name for f in fragments] == ["a"]


# =============================================================================
# Formatting
# =============================================================================


class TestFormatting:
    """Tests for fragment body formatting."""

    def test_inline_partial_indents_following_lines(self):
        """Lines after the first get the doc-comment indentation."""
        assert format_inline_partial("X\nY") == "\nX\n   * Y"

    def test_inline_partial_single_line(self):
        assert format_inline_partial("only") == "\nonly"

    def test_shared_block_has_two_blank_lines(self):
        assert format_shared_block("Body") == "\n\n\nBody"

    def test_placeholder_syntax(self):
        assert partial("click", "").placeholder == "{{> click }}"
        assert shared("intro", "").placeholder == "{{ intro }}"


# =============================================================================
# SubstitutionEngine
# =============================================================================


class TestSubstitutionEngine:
    """Tests for SubstitutionEngine."""

    def test_inline_partial_replaced(self):
        """The partial lands inside the doc-comment with its indentation."""
        engine = SubstitutionEngine(partials=[partial("p", "X\nY")])

        result = engine.substitute("/**\n * {{> p }}\n */")

        assert result == "/**\n * \nX\n   * Y\n */"

    def test_shared_block_replaced(self):
        engine = SubstitutionEngine(shared=[shared("s", "Body")])

        assert engine.substitute("{{ s }}") == "\n\n\nBody"

    def test_every_occurrence_replaced(self):
        engine = SubstitutionEngine(partials=[partial("p", "X")])

        assert engine.substitute("{{> p }} and {{> p }}") == "\nX and \nX"

    def test_unknown_placeholder_left_verbatim(self):
        """Unresolved placeholders pass through unchanged."""
        engine = SubstitutionEngine(partials=[partial("p", "X")])

        assert engine.substitute("{{> unknown }} {{ other }}") == "{{> unknown }} {{ other }}"

    def test_namespaces_do_not_collide(self):
        """A partial and a shared block may share a name."""
        engine = SubstitutionEngine(partials=[partial("x", "P")], shared=[shared("x", "S")])

        assert engine.substitute("{{> x }}|{{ x }}") == "\nP|\n\n\nS"

    def test_fragments_of_wrong_kind_are_ignored(self):
        engine = SubstitutionEngine(partials=[shared("s", "S")])

        assert engine.placeholders == []

    def test_alias_expansion_optional_forms_first(self):
        """Optional aliases are rewritten before the bare forms."""
        engine = SubstitutionEngine()

        assert engine.substitute("{CodeceptJS.LocatorOrString?}") == "{(string | object)?}"
        assert engine.substitute("{LocatorOrString?}") == "{(string | object)?}"
        assert engine.substitute("{CodeceptJS.LocatorOrString}") == "{string | object}"
        assert engine.substitute("{CodeceptJS.StringOrSecret}") == "{string | object}"

    def test_alias_expansion_can_be_skipped(self):
        engine = SubstitutionEngine()

        assert engine.substitute("{LocatorOrString}", expand_aliases=False) == "{LocatorOrString}"

    def test_custom_aliases(self):
        engine = SubstitutionEngine(type_aliases=[[r"Secret", "string"]])

        assert engine.substitute("{Secret} {LocatorOrString}") == "{string} {LocatorOrString}"

    def test_no_placeholders_is_identity(self):
        engine = SubstitutionEngine(partials=[partial("p", "X")], type_aliases=[])
        text = "class Foo {}\n"

        assert engine.substitute(text) == text


class TestPrepare:
    """Tests for writing intermediate copies."""

    def test_writes_copy_and_leaves_source(self, tmp_path):
        """The copy is substituted; the original module is not written."""
        source = tmp_path / "lib" / "Foo.js"
        source.parent.mkdir()
        source.write_text("/** {{> p }} {LocatorOrString} */")
        engine = SubstitutionEngine(partials=[partial("p", "X")])

        target = engine.prepare(Module.from_path(source), tmp_path / "build")

        assert target == tmp_path / "build" / "Foo.js"
        assert target.read_text() == "/** \nX {string | object} */"
        assert source.read_text() == "/** {{> p }} {LocatorOrString} */"

    def test_for_typings_keeps_aliases(self, tmp_path):
        source = tmp_path / "Foo.js"
        source.write_text("{LocatorOrString}")
        engine = SubstitutionEngine()

        target = engine.prepare(Module.from_path(source), tmp_path / "build", for_typings=True)

        assert target.read_text() == "{LocatorOrString}"

    def test_missing_source_raises(self, tmp_path):
        engine = SubstitutionEngine()

        with pytest.raises(SourceReadError) as exc_info:
            engine.prepare(Module.from_path(tmp_path / "Gone.js"), tmp_path / "build")

        assert exc_info.value.module == "Gone"
        assert exc_info.value.context.stage == "substitute"

    def test_build_dir_equal_to_source_dir_rejected(self, tmp_path):
        """Writing into the source directory would overwrite the module."""
        source = tmp_path / "Foo.js"
        source.write_text("x")

        with pytest.raises(ConfigError):
            SubstitutionEngine().prepare(Module.from_path(source), tmp_path)

        assert source.read_text() == "x"
