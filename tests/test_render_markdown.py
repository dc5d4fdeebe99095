"""Tests for the Markdown renderer."""

import unittest

from savenotes.domain import (
    AttributeRun,
    FontStyle,
    ParagraphStyle,
    StyleCode,
    TextBits,
    TextStyle,
    UrlStyle,
    UuidStyle,
)
from savenotes.rendering.markdown import (
    MarkdownRenderer,
    escape_line_start,
    escape_markdown,
)
from savenotes.rendering.options import RenderConfig


def styled(length, code=StyleCode.NONE, *inline, indent=0, checked=False):
    para = ParagraphStyle.from_code(code, indent, checked)
    return AttributeRun(length, (para,) + tuple(inline))


BOLD = TextStyle(bits=TextBits.BOLD)


class MarkdownBlockTest(unittest.TestCase):
    def setUp(self):
        self.renderer = MarkdownRenderer()

    def render(self, text, *runs):
        return self.renderer.render(text, runs)

    def test_bold_text(self):
        self.assertEqual(self.render("Bold", styled(4, StyleCode.NONE, BOLD)), "**Bold**")

    def test_checked_item(self):
        out = self.render("Task\n", styled(5, StyleCode.CHECKLIST, indent=1, checked=True))
        self.assertEqual(out, "  - [x] Task\n")

    def test_unchecked_item(self):
        out = self.render("Task\n", styled(5, StyleCode.CHECKLIST))
        self.assertEqual(out, "- [ ] Task\n")

    def test_hard_break_between_plain_lines(self):
        self.assertEqual(self.render("one\ntwo\n", AttributeRun(8)), "one\\\ntwo\n")

    def test_no_hard_break_after_empty_line(self):
        out = self.render("one\n\ntwo\n", AttributeRun(9))
        self.assertEqual(out, "one\n\ntwo\n")

    def test_hard_break_across_runs(self):
        out = self.render("one\ntwo\n", AttributeRun(4), styled(4, StyleCode.NONE, BOLD))
        self.assertEqual(out, "one\\\n**two**\n")

    def test_code_block_between_paragraphs(self):
        out = self.render(
            "Body\nx_y()\nafter\n",
            AttributeRun(5),
            styled(6, StyleCode.MONOSPACED),
            AttributeRun(6),
        )
        self.assertEqual(out, "Body\n\n```\nx_y()\n```\n\nafter\n")

    def test_inline_styles_suppressed_in_code(self):
        out = self.render("*x*\n", styled(4, StyleCode.MONOSPACED, BOLD))
        self.assertEqual(out, "```\n*x*\n```\n")

    def test_attachment_placeholder_in_code(self):
        out = self.render(
            "x\n\ufffc\n",
            styled(2, StyleCode.MONOSPACED),
            styled(2, StyleCode.MONOSPACED, UuidStyle("ABC", "public.jpeg")),
        )
        self.assertEqual(out, "```\nx\n[INSERT UUID ABC, TYPE public.jpeg]\n```\n")

    def test_lists(self):
        out = self.render(
            "a\nb\nc\n",
            styled(2, StyleCode.BULLET_LIST),
            styled(2, StyleCode.DASHED_LIST, indent=1),
            styled(2, StyleCode.NUMBERED_LIST),
        )
        self.assertEqual(out, "* a\n  - b\n1. c\n")

    def test_paragraph_then_list(self):
        out = self.render("p\nitem\n", AttributeRun(2), styled(5, StyleCode.BULLET_LIST))
        self.assertEqual(out, "p\n\n* item\n")

    def test_heading_then_body(self):
        out = self.render("Title\nBody\n", styled(6, StyleCode.TITLE), AttributeRun(5))
        self.assertEqual(out, "# Title\n\nBody\n")

    def test_heading_prefixes(self):
        out = self.render(
            "a\nb\n", styled(2, StyleCode.HEADING), styled(2, StyleCode.SUBHEADING)
        )
        self.assertEqual(out, "## a\n### b\n")

    def test_empty_list_line_has_no_marker(self):
        out = self.render("a\n\n", styled(3, StyleCode.BULLET_LIST))
        self.assertEqual(out, "* a\n\n")

    def test_unknown_code(self):
        out = self.render("x\n", styled(2, 7))
        self.assertEqual(out, '<div style="7">\nx\n</div>\n')

    def test_leading_whitespace(self):
        out = MarkdownRenderer(RenderConfig(tab_width=1)).render(" \tx", [AttributeRun(3)])
        self.assertEqual(out, "&nbsp;&nbsp;x")


class MarkdownInlineTest(unittest.TestCase):
    def test_nesting_order(self):
        run = styled(
            1,
            StyleCode.NONE,
            UrlStyle("http://e.com"),
            FontStyle(None, 14.0),
            TextStyle(bits=TextBits.BOLD | TextBits.ITALIC),
        )
        out = MarkdownRenderer().render("x", [run])
        self.assertEqual(out, '[<font size="14">**_x_**</font>](http://e.com)')

    def test_attachment_placeholder(self):
        run = styled(1, StyleCode.NONE, UuidStyle("U1", "public.jpeg"))
        out = MarkdownRenderer().render("\ufffc", [run])
        self.assertEqual(out, "[INSERT UUID U1, TYPE public.jpeg]")

    def test_escaping(self):
        out = MarkdownRenderer().render("a*b_[c]\n", [AttributeRun(8)])
        self.assertEqual(out, "a\\*b\\_\\[c\\]\n")

    def test_escaping_disabled(self):
        config = RenderConfig(escape_markdown=False)
        out = MarkdownRenderer(config).render("a*b_\n", [AttributeRun(5)])
        self.assertEqual(out, "a*b_\n")

    def test_renderer_keeps_no_state(self):
        renderer = MarkdownRenderer()
        runs = [AttributeRun(4), styled(6, StyleCode.MONOSPACED)]
        first = renderer.render("one\ncode()", runs)
        self.assertEqual(renderer.render("one\ncode()", runs), first)

    def test_escape_markdown(self):
        self.assertEqual(escape_markdown(r"\`x`"), r"\\\`x\`")
        self.assertEqual(escape_markdown("plain text"), "plain text")


class MarkdownLineStartTest(unittest.TestCase):
    def render(self, text, config=None):
        return MarkdownRenderer(config).render(text, [AttributeRun(len(text))])

    def test_block_markers_are_escaped(self):
        cases = {
            "# x\n": "\\# x\n",
            "> q\n": "\\> q\n",
            "- x\n": "\\- x\n",
            "+ x\n": "\\+ x\n",
            "1. x\n": "1\\. x\n",
            "12) x\n": "12\\) x\n",
            "---\n": "\\---\n",
        }
        for text, expected in cases.items():
            with self.subTest(text=text):
                self.assertEqual(self.render(text), expected)

    def test_ordinary_text_is_untouched(self):
        for text in ("-5 degrees\n", "a # b\n", "1.5 cups\n"):
            with self.subTest(text=text):
                self.assertEqual(self.render(text), text)

    def test_marker_after_hard_break(self):
        self.assertEqual(self.render("one\n# two\n"), "one\\\n\\# two\n")

    def test_marker_inside_list_item(self):
        out = MarkdownRenderer().render("- x\n", [styled(4, StyleCode.BULLET_LIST)])
        self.assertEqual(out, "* \\- x\n")

    def test_continuation_run_is_not_line_start(self):
        out = MarkdownRenderer().render(
            "a # b\n", [AttributeRun(2), styled(4, StyleCode.NONE, BOLD)]
        )
        self.assertEqual(out, "a **# b**\n")

    def test_escaping_disabled(self):
        config = RenderConfig(escape_markdown=False)
        self.assertEqual(self.render("# x\n", config), "# x\n")

    def test_escape_line_start(self):
        self.assertEqual(escape_line_start("> quote"), "\\> quote")
        self.assertEqual(escape_line_start("3. item"), "3\\. item")
        self.assertEqual(escape_line_start("plain"), "plain")


if __name__ == "__main__":
    unittest.main()
