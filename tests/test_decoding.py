"""Tests for stored-body decompression and decoding."""

import gzip
import unittest
import zlib

from archive_builder import note_archive, run
from savenotes.decoding import BodyDecoder, decode_body, decompress
from savenotes.exceptions import NoteBodyError, SchemaFault

ARCHIVE = note_archive("Hello\n", runs=[run(6)])


def raw_deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


class DecompressTest(unittest.TestCase):
    def test_gzip(self):
        self.assertEqual(decompress(gzip.compress(ARCHIVE)), ARCHIVE)

    def test_zlib(self):
        self.assertEqual(decompress(zlib.compress(ARCHIVE)), ARCHIVE)

    def test_raw_deflate(self):
        self.assertEqual(decompress(raw_deflate(ARCHIVE)), ARCHIVE)

    def test_garbage(self):
        with self.assertRaises(zlib.error):
            decompress(b"\xff\xff\xff")


class DecodeBodyTest(unittest.TestCase):
    def test_gzipped_body(self):
        body = decode_body(gzip.compress(ARCHIVE))
        self.assertEqual(body.text, "Hello\n")
        self.assertEqual(len(body.runs), 1)
        self.assertTrue(body.ok)

    def test_text_input_is_rejected(self):
        with self.assertRaises(TypeError):
            decode_body("H4sIAAAAAAAA")

    def test_memoryview_input(self):
        body = decode_body(memoryview(zlib.compress(ARCHIVE)))
        self.assertEqual(body.text, "Hello\n")

    def test_empty(self):
        with self.assertRaises(NoteBodyError):
            decode_body(b"")

    def test_not_compressed(self):
        with self.assertRaises(NoteBodyError):
            decode_body(b"\xff\xff\xff")

    def test_truncated_gzip(self):
        with self.assertRaises(NoteBodyError):
            decode_body(gzip.compress(ARCHIVE)[:12])

    def test_bad_archive(self):
        with self.assertRaises(SchemaFault):
            decode_body(gzip.compress(b"\x0b"))


class BodyDecoderTest(unittest.TestCase):
    def setUp(self):
        self.decoder = BodyDecoder()

    def test_decode(self):
        body = self.decoder.decode(gzip.compress(ARCHIVE))
        self.assertIsNotNone(body)
        self.assertEqual(body.text, "Hello\n")

    def test_none(self):
        self.assertIsNone(self.decoder.decode(None))

    def test_failures_return_none(self):
        for blob in (b"", b"\xff\xff\xff", gzip.compress(b"\x0b")):
            with self.subTest(blob=blob):
                self.assertIsNone(self.decoder.decode(blob))


if __name__ == "__main__":
    unittest.main()
