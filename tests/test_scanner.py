"""Tests for the single-line marker scanner."""
import pytest

from lazy_latex.markers.scanner import is_comment_line, scan
from lazy_latex.markers.schemas import DocumentKind, MarkerCategory

LATEX = DocumentKind.LATEX
MARKDOWN = DocumentKind.MARKDOWN


class TestWellFormedMarkers:

    def test_inline_marker_payload_and_span(self):
        line = "The pdf is ;;normal(0, 1);;."
        markers = scan(line, LATEX)

        assert len(markers) == 1
        m = markers[0]
        assert m.category is MarkerCategory.INLINE
        assert m.payload == "normal(0, 1)"
        assert line[m.start:m.end] == ";;normal(0, 1);;"
        assert m.span == (11, 27)

    @pytest.mark.parametrize(
        "delim, category",
        [
            (";;", MarkerCategory.INLINE),
            (";;;", MarkerCategory.DISPLAY),
            (";;;;", MarkerCategory.ANYTHING),
        ],
    )
    def test_run_length_selects_category(self, delim, category):
        line = f"x {delim} payload {delim} y"
        markers = scan(line, LATEX)

        assert [m.category for m in markers] == [category]
        assert markers[0].payload == " payload "
        assert line[markers[0].start:markers[0].end] == f"{delim} payload {delim}"

    def test_two_markers_in_document_order(self):
        line = ";;a;; and ;;;b;;;"
        markers = scan(line, LATEX)

        assert [(m.category, m.payload) for m in markers] == [
            (MarkerCategory.INLINE, "a"),
            (MarkerCategory.DISPLAY, "b"),
        ]
        assert markers[0].end <= markers[1].start

    def test_shorter_run_inside_payload_does_not_close(self):
        markers = scan(";;;a ;; b;;;", LATEX)

        assert len(markers) == 1
        assert markers[0].category is MarkerCategory.DISPLAY
        assert markers[0].payload == "a ;; b"

    def test_longer_run_inside_payload_does_not_close(self):
        markers = scan(";;a;;;;b;;", LATEX)

        assert len(markers) == 1
        assert markers[0].payload == "a;;;;b"

    def test_empty_payload_is_still_a_marker(self):
        markers = scan("x ;;;; ;;;; y", LATEX)
        assert [m.category for m in markers] == [MarkerCategory.ANYTHING]
        assert markers[0].payload == " "


class TestNonMarkers:

    @pytest.mark.parametrize(
        "line",
        [
            "a ; b ; c",
            ";x;",
            ";;;;;x;;;;;",
            ";;;;;;x;;;;;;",
            "plain text",
            "",
        ],
    )
    def test_no_marker(self, line):
        assert scan(line, LATEX) == []

    def test_unterminated_opener_is_abandoned(self):
        assert scan("value ;;x + 1", LATEX) == []

    def test_mismatched_closer_is_not_a_marker(self):
        assert scan(";;x;;;", LATEX) == []

    def test_scanning_resumes_after_abandoned_opener(self):
        line = ";;; open ;; closed ;;"
        markers = scan(line, LATEX)

        assert len(markers) == 1
        assert markers[0].category is MarkerCategory.INLINE
        assert markers[0].payload == " closed "

    def test_five_run_is_not_split_into_sub_runs(self):
        assert scan("a ;;;;; b ;; c", LATEX) == []


class TestCommentLines:

    @pytest.mark.parametrize("line", ["% ;;x;;", "   %;;;y;;;", "%"])
    def test_latex_comment_line_is_skipped(self, line):
        assert is_comment_line(line, LATEX)
        assert scan(line, LATEX) == []

    def test_latex_trailing_comment_is_scanned(self):
        markers = scan("a ;;x;; % note", LATEX)
        assert [m.payload for m in markers] == ["x"]

    def test_markdown_comment_line_is_skipped(self):
        line = "  <!-- ;;x;; -->  "
        assert scan(line, MARKDOWN) == []

    def test_markdown_partial_comment_is_scanned(self):
        markers = scan("<!-- note --> ;;x;;", MARKDOWN)
        assert [m.payload for m in markers] == ["x"]

    def test_percent_is_not_a_comment_in_markdown(self):
        markers = scan("% ;;x;;", MARKDOWN)
        assert [m.payload for m in markers] == ["x"]


class TestOrderingAndStability:

    LINE = "Let ;;a;; and ;;;b^2;;; then ;;;;explain;;;; and ;;c;;."

    def test_markers_sorted_and_non_overlapping(self):
        markers = scan(self.LINE, LATEX)

        assert len(markers) == 4
        for prev, nxt in zip(markers, markers[1:]):
            assert prev.end <= nxt.start

    def test_stable_under_right_to_left_removal(self):
        markers = scan(self.LINE, LATEX)

        line = self.LINE
        remaining = list(markers)
        while remaining:
            last = remaining.pop()
            line = line[:last.start] + line[last.end:]
            assert scan(line, LATEX) == remaining
