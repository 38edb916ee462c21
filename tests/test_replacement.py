"""Tests for the replacement engine."""
from lazy_latex.editing.replacement import (
    MARKDOWN_DELIMITERS,
    LineEdit,
    PlanEntry,
    TextReplacement,
    apply_replacements,
    build_line_edit,
    output_delimiters,
    plan_entries,
    render_line,
)
from lazy_latex.markers.scanner import scan
from lazy_latex.markers.schemas import DocumentKind, MarkerCategory
from tests.conftest import make_settings

LATEX = DocumentKind.LATEX
MARKDOWN = DocumentKind.MARKDOWN


def _latex_delims(**overrides):
    return output_delimiters(LATEX, make_settings(**overrides))


class TestDelimiters:

    def test_markdown_is_fixed(self):
        settings = make_settings(LATEX_INLINE_STYLE="paren", LATEX_DISPLAY_STYLE="dollars")
        assert output_delimiters(MARKDOWN, settings) == MARKDOWN_DELIMITERS

    def test_latex_defaults(self):
        d = _latex_delims()
        assert (d.inline.open, d.inline.close) == ("$", "$")
        assert (d.display.open, d.display.close) == ("\\[", "\\]")

    def test_latex_alternate_styles(self):
        d = _latex_delims(LATEX_INLINE_STYLE="paren", LATEX_DISPLAY_STYLE="dollars")
        assert (d.inline.open, d.inline.close) == ("\\(", "\\)")
        assert (d.display.open, d.display.close) == ("$$", "$$")


class TestApply:

    def test_inline_round_trip(self):
        line = "The pdf is ;;normal(0, 1);;."
        entries = plan_entries(scan(line, LATEX), ["\\mathcal{N}(0,1)"])

        result = apply_replacements(line, entries, _latex_delims(), LATEX)

        assert result.edited_text == "The pdf is $\\mathcal{N}(0,1)$."
        assert not result.is_multiline

    def test_paren_inline_style(self):
        line = "Let ;;x squared;; be"
        entries = plan_entries(scan(line, LATEX), ["x^2"])

        result = apply_replacements(
            line, entries, _latex_delims(LATEX_INLINE_STYLE="paren"), LATEX
        )
        assert result.edited_text == "Let \\(x^2\\) be"

    def test_two_markers_apply_without_interference(self):
        line = ";;a;; and ;;;b;;;"
        markers = scan(line, LATEX)
        assert [m.category for m in markers] == [MarkerCategory.INLINE, MarkerCategory.DISPLAY]

        result = apply_replacements(line, plan_entries(markers, ["A", "B"]), _latex_delims(), LATEX)

        inline = "$A$"
        display = "\n\\[\nB\n\\]\n"
        expected = (
            line[: markers[0].start]
            + inline
            + line[markers[0].end : markers[1].start]
            + display
            + line[markers[1].end :]
        )
        assert result.edited_text == expected == "$A$ and \n\\[\nB\n\\]\n"
        assert result.is_multiline

    def test_display_at_line_start_gets_no_leading_break(self):
        line = "  ;;;sum of i from 1 to n;;;"
        entries = plan_entries(scan(line, LATEX), ["\\sum_{i=1}^{n} i"])

        result = apply_replacements(line, entries, _latex_delims(), LATEX)
        assert result.edited_text == "  \\[\n\\sum_{i=1}^{n} i\n\\]\n"

    def test_markdown_display_uses_double_dollars(self):
        line = "so ;;;x;;;"
        entries = plan_entries(scan(line, MARKDOWN), ["x^2"])

        result = apply_replacements(line, entries, MARKDOWN_DELIMITERS, MARKDOWN)
        assert result.edited_text == "so \n$$\nx^2\n$$\n"

    def test_anything_is_inserted_verbatim(self):
        line = "Intro: ;;;;one sentence about groups;;;; Done."
        entries = plan_entries(scan(line, LATEX), ["A group is a set with \\emph{structure}."])

        result = apply_replacements(line, entries, _latex_delims(), LATEX)
        assert result.edited_text == "Intro: A group is a set with \\emph{structure}. Done."

    def test_empty_generation_leaves_marker_untouched(self):
        line = ";;a;; and ;;b;;"
        markers = scan(line, LATEX)
        entries = plan_entries(markers, ["   ", "B"])

        assert len(entries) == 1
        result = apply_replacements(line, entries, _latex_delims(), LATEX)
        assert result.edited_text == ";;a;; and $B$"

    def test_generated_text_is_trimmed(self):
        entries = plan_entries(scan(";;a;;", LATEX), ["  \\alpha \n"])
        assert entries[0].text == "\\alpha"


class TestOriginalComment:

    def test_latex_comment_above_line(self):
        line = "x is ;;alpha;;"
        entries = plan_entries(scan(line, LATEX), ["\\alpha"])

        result = apply_replacements(line, entries, _latex_delims(), LATEX, keep_original_comment=True)

        assert result.edited_text == "% [lazy-latex input] x is ;;alpha;;\nx is $\\alpha$"
        assert result.is_multiline

    def test_markdown_comment_above_line(self):
        line = "x is ;;alpha;;"
        entries = plan_entries(scan(line, MARKDOWN), ["\\alpha"])

        result = apply_replacements(
            line, entries, MARKDOWN_DELIMITERS, MARKDOWN, keep_original_comment=True
        )
        assert result.edited_text.splitlines()[0] == "<!-- [lazy-latex input] x is ;;alpha;; -->"

    def test_no_comment_without_replacements(self):
        edit = build_line_edit("x ;;a;;", [], _latex_delims(), LATEX, keep_original_comment=True)
        assert edit.is_empty


class TestRightToLeft:

    def test_replacements_are_ordered_by_descending_start(self):
        entries = [
            PlanEntry(0, 5, MarkerCategory.INLINE, "A"),
            PlanEntry(10, 15, MarkerCategory.INLINE, "B"),
        ]
        edit = build_line_edit(";;a;; and ;;b;;", entries, _latex_delims(), LATEX)
        assert [r.start for r in edit.replacements] == [10, 0]

    def test_render_sorts_unordered_replacements(self):
        edit = LineEdit(
            replacements=(TextReplacement(0, 5, "long replacement"), TextReplacement(10, 15, "Z"))
        )
        assert render_line(";;a;; and ;;b;;", edit) == "long replacement and Z"
