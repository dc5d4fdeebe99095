"""Tests for the note-body schema walk."""

import unittest

from archive_builder import (
    attachment,
    color,
    edit_record,
    font,
    int_field,
    message,
    note_archive,
    paragraph,
    run,
    string_field,
)
from savenotes.archive.schema import decode_note_body
from savenotes.domain import (
    ColorStyle,
    FontStyle,
    ParagraphKind,
    ParagraphStyle,
    TextBits,
    TextStyle,
    UrlStyle,
    UuidStyle,
)
from savenotes.exceptions import (
    DecodeFault,
    IntegrityFault,
    SchemaFault,
    UnknownStyleFault,
)


class NoteBodyTest(unittest.TestCase):
    """Well-formed archives."""

    def setUp(self):
        self.text = "Groceries\nBuy milk today\nEggs\nBread\n"
        self.archive = note_archive(
            self.text,
            runs=[
                run(10, paragraph(code=0)),
                run(4),
                run(4, int_field(5, 1)),
                run(7),
                run(5, paragraph(code=100)),
                run(6, paragraph(code=100, indent=1)),
            ],
            edits=[edit_record(0, 10), edit_record(10, 15, f2=True, links=(1, 2))],
            versions=(2, 5),
        )

    def test_text_and_runs(self):
        body = decode_note_body(self.archive)
        self.assertEqual(body.text, self.text)
        self.assertEqual([r.length for r in body.runs], [10, 4, 4, 7, 5, 6])
        self.assertTrue(body.ok, body.faults)

    def test_paragraph_styles(self):
        body = decode_note_body(self.archive)
        kinds = [r.paragraph_style.kind for r in body.runs]
        self.assertEqual(
            kinds,
            [
                ParagraphKind.TITLE,
                ParagraphKind.NONE,
                ParagraphKind.NONE,
                ParagraphKind.NONE,
                ParagraphKind.BULLET,
                ParagraphKind.BULLET,
            ],
        )
        self.assertEqual(body.runs[5].paragraph_style.indent, 1)

    def test_every_run_has_a_paragraph_style_first(self):
        body = decode_note_body(self.archive)
        for r in body.runs:
            self.assertIsInstance(r.styles[0], ParagraphStyle)
        self.assertEqual(body.runs[1].styles, (ParagraphStyle(),))

    def test_bold_run(self):
        body = decode_note_body(self.archive)
        self.assertEqual(body.runs[2].inline_styles, (TextStyle(bits=TextBits.BOLD),))

    def test_edit_records_and_versions(self):
        body = decode_note_body(self.archive)
        self.assertEqual(body.edit_count, 2)
        self.assertEqual(body.versions, (2, 5))

    def test_missing_version_marker(self):
        body = decode_note_body(note_archive("x", runs=[run(1)], versions=(None, 3)))
        self.assertEqual(body.versions, (-1, 3))
        self.assertTrue(body.ok)

    def test_astral_text_counts_utf16_units(self):
        text = "\U0001F600 ok\n"
        body = decode_note_body(note_archive(text, runs=[run(6)]))
        self.assertTrue(body.ok, body.faults)


class StyleFieldsTest(unittest.TestCase):
    def decode_run(self, *fields, text="abcd"):
        body = decode_note_body(note_archive(text, runs=[run(len(text), *fields)]))
        self.assertEqual(len(body.runs), 1)
        return body, body.runs[0]

    def test_assembly_order(self):
        # written in archive order, assembled in style order
        _, r = self.decode_run(
            paragraph(code=1),
            font(name="Helvetica", size=18.0),
            int_field(5, 3),
            string_field(9, "https://example.com"),
            color((1.0, 0.5, 0.25, 1.0)),
            attachment("UUID-1", "public.jpeg"),
        )
        self.assertEqual(
            [type(s) for s in r.styles],
            [ParagraphStyle, UuidStyle, UrlStyle, FontStyle, TextStyle, ColorStyle],
        )
        self.assertEqual(r.styles[1], UuidStyle("UUID-1", "public.jpeg"))
        self.assertEqual(r.styles[2], UrlStyle("https://example.com"))
        self.assertEqual(r.styles[3], FontStyle("Helvetica", 18.0))
        self.assertTrue(r.styles[4].bold and r.styles[4].italic)
        self.assertEqual(r.styles[5], ColorStyle(1.0, 0.5, 0.25, 1.0))
        self.assertEqual(r.styles[5].hex, "#FF8040")

    def test_default_font_is_dropped(self):
        _, r = self.decode_run(font(size=12.0, hints=1))
        self.assertEqual(r.inline_styles, ())

    def test_font_size_only(self):
        _, r = self.decode_run(font(size=14.0))
        self.assertEqual(r.inline_styles, (FontStyle(None, 14.0),))

    def test_pass_through_text_flags(self):
        _, r = self.decode_run(int_field(6, 1), int_field(7, 1), int_field(8, -1))
        self.assertEqual(
            r.inline_styles,
            (TextStyle(underline=1, strikethrough=1, baseline=-1),),
        )

    def test_zero_flags_produce_no_text_style(self):
        _, r = self.decode_run(int_field(5, 0), int_field(6, 0))
        self.assertEqual(r.inline_styles, ())

    def test_unknown_text_bits(self):
        body, r = self.decode_run(int_field(5, 0x9))
        self.assertEqual(r.inline_styles, (TextStyle(bits=TextBits.BOLD),))
        self.assertIsInstance(body.faults[0], UnknownStyleFault)

    def test_field_11_is_informational(self):
        body, r = self.decode_run(int_field(11, 4))
        self.assertTrue(body.ok)
        self.assertEqual(r.inline_styles, ())

    def test_checklist(self):
        _, r = self.decode_run(paragraph(code=103, indent=2, checked=True))
        style = r.paragraph_style
        self.assertEqual(style.kind, ParagraphKind.CHECKLIST)
        self.assertEqual(style.indent, 2)
        self.assertTrue(style.checked)

    def test_informational_paragraph_fields(self):
        body, r = self.decode_run(paragraph(code=102, alignment=1))
        self.assertTrue(body.ok)
        self.assertEqual(r.paragraph_style.kind, ParagraphKind.NUMBERED)

    def test_paragraph_without_code(self):
        _, r = self.decode_run(paragraph(indent=1))
        self.assertEqual(r.paragraph_style.kind, ParagraphKind.NONE)

    def test_unknown_paragraph_code(self):
        body, r = self.decode_run(paragraph(code=7))
        self.assertEqual(r.paragraph_style.kind, ParagraphKind.UNKNOWN)
        self.assertEqual(r.paragraph_style.code, 7)
        fault = body.faults[0]
        self.assertIsInstance(fault, UnknownStyleFault)
        self.assertEqual(fault.field_index, 7)
        self.assertEqual(fault.run_index, 0)

    def test_unknown_paragraph_field(self):
        body, r = self.decode_run(message(2, int_field(1, 1), int_field(9, 1), int_field(4, 3)))
        self.assertEqual(r.paragraph_style.kind, ParagraphKind.HEADING)
        # fields after the unknown one are not read
        self.assertEqual(r.paragraph_style.indent, 0)
        self.assertIsInstance(body.faults[0], UnknownStyleFault)


class FaultTest(unittest.TestCase):
    def test_unknown_run_field_keeps_run(self):
        archive = note_archive(
            "abcdef",
            runs=[
                run(3, int_field(5, 1), int_field(13, 0), string_field(9, "x")),
                run(3, int_field(5, 2)),
            ],
        )
        body = decode_note_body(archive)
        self.assertEqual(len(body.runs), 2)
        self.assertEqual(body.runs[0].inline_styles, (TextStyle(bits=TextBits.BOLD),))
        self.assertEqual(body.runs[1].inline_styles, (TextStyle(bits=TextBits.ITALIC),))
        self.assertEqual(len(body.faults), 1)
        fault = body.faults[0]
        self.assertIsInstance(fault, UnknownStyleFault)
        self.assertEqual((fault.run_index, fault.field_index), (0, 13))

    def test_integrity_mismatch(self):
        body = decode_note_body(note_archive("abcdef", runs=[run(2), run(2)]))
        self.assertEqual(len(body.runs), 2)
        faults = body.integrity_faults
        self.assertEqual(len(faults), 1)
        self.assertEqual((faults[0].text_length, faults[0].runs_length), (6, 4))

    def test_no_runs_is_an_integrity_fault(self):
        body = decode_note_body(note_archive("abc"))
        self.assertEqual(body.runs, ())
        self.assertIsInstance(body.faults[0], IntegrityFault)

    def test_empty_note(self):
        body = decode_note_body(note_archive(""))
        self.assertEqual(body.text, "")
        self.assertTrue(body.ok)

    def test_malformed_record_after_runs(self):
        body = decode_note_body(note_archive("abc", runs=[run(3)], tail=b"\x0b"))
        self.assertEqual(len(body.runs), 1)
        fault = body.faults[0]
        self.assertIsInstance(fault, SchemaFault)
        self.assertIsInstance(fault.cause, DecodeFault)
        self.assertEqual(fault.cause.tag, 3)

    def test_malformed_record_inside_run(self):
        archive = note_archive(
            "abcdef", runs=[run(3, int_field(5, 1), b"\x0b"), run(3)]
        )
        body = decode_note_body(archive)
        self.assertEqual(len(body.runs), 2)
        self.assertEqual(body.runs[0].inline_styles, (TextStyle(bits=TextBits.BOLD),))
        self.assertIsInstance(body.faults[0], SchemaFault)

    def test_missing_edit_records(self):
        note = string_field(2, "abc")
        document = int_field(1, 0) + int_field(2, 0) + message(3, note)
        body = decode_note_body(int_field(1, 0) + message(2, document))
        self.assertEqual(body.text, "abc")
        self.assertEqual(body.runs, ())
        self.assertIsInstance(body.faults[0], SchemaFault)

    def test_empty_archive(self):
        with self.assertRaises(SchemaFault) as ctx:
            decode_note_body(b"")
        self.assertEqual(ctx.exception.actual, "end of data")

    def test_garbage_archive(self):
        with self.assertRaises(SchemaFault) as ctx:
            decode_note_body(b"\x0b\x00")
        self.assertIsInstance(ctx.exception.cause, DecodeFault)

    def test_wrong_root_field(self):
        with self.assertRaises(SchemaFault) as ctx:
            decode_note_body(int_field(2, 0))
        self.assertEqual(ctx.exception.expected, "field 1")


if __name__ == "__main__":
    unittest.main()
