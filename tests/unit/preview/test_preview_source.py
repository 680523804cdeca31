"""Tests for plain-text preview documents."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from filescram.preview import (
    PreviewLimits,
    build_file_preview,
    build_preview,
    decode_text,
    help_document,
    is_binary_bytes,
    language_name,
)
from filescram.tree_model import NodeKind, TreeNode


class BinaryDetectionTests(unittest.TestCase):
    def test_more_than_one_percent_nul_bytes_is_binary(self) -> None:
        self.assertTrue(is_binary_bytes(b"\x00" * 2 + b"a" * 98))
        self.assertFalse(is_binary_bytes(b"\x00" + b"a" * 99))
        self.assertFalse(is_binary_bytes(b""))

    def test_only_leading_sample_is_checked(self) -> None:
        self.assertFalse(is_binary_bytes(b"a" * 1024 + b"\x00" * 500))


class FilePreviewTests(unittest.TestCase):
    def test_text_is_truncated_with_marker(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "notes.txt"
            path.write_text("\n".join(f"line {idx}" for idx in range(10)), encoding="utf-8")

            document = build_file_preview(path, PreviewLimits(max_lines=3))

            self.assertEqual(document.kind, "text")
            self.assertEqual(document.title, "notes.txt")
            self.assertEqual(document.lines[:3], ["line 0", "line 1", "line 2"])
            self.assertEqual(document.lines[-1], "[... truncated at 3 lines, total: 10 lines]")

    def test_text_is_decoded_from_a_single_read(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "legacy.txt"
            path.write_bytes("café crème".encode("latin-1"))

            with mock.patch.object(Path, "read_text") as read_text, mock.patch.object(
                Path, "read_bytes", autospec=True, side_effect=Path.read_bytes
            ) as read_bytes:
                document = build_file_preview(path)

            read_text.assert_not_called()
            self.assertEqual(read_bytes.call_count, 1)
            self.assertEqual(document.body, "café crème")

    def test_utf8_bom_is_stripped(self) -> None:
        self.assertEqual(decode_text(b"\xef\xbb\xbfhello"), "hello")
        self.assertEqual(decode_text(b"\xff\xfe"), "ÿþ")

    def test_source_files_get_language_banner(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "tool.py"
            path.write_text("print('hi')\n", encoding="utf-8")

            document = build_file_preview(path)

            self.assertEqual(document.kind, "code")
            self.assertEqual(document.lines[0], "Language: Python")
            self.assertIn("print('hi')", document.body)

    def test_plain_suffixes_have_no_language(self) -> None:
        self.assertIsNone(language_name(Path("README.md")))
        self.assertIsNone(language_name(Path("data.json")))
        self.assertIsNone(language_name(Path("no_suffix")))

    def test_oversized_file_is_not_read(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "big.txt"
            path.write_text("x" * 200, encoding="utf-8")

            document = build_file_preview(path, PreviewLimits(max_bytes=100))

            self.assertEqual(document.kind, "large")
            self.assertIn("File is too large to preview.", document.body)
            self.assertIn("Limit: 100 Bytes", document.body)

    def test_binary_content_gets_metadata_card(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "blob.dat"
            path.write_bytes(b"\x00\x01\x02" * 50)

            document = build_file_preview(path)

            self.assertEqual(document.kind, "binary")
            self.assertEqual(document.lines[0], "Binary File")
            self.assertIn("Extension: .dat", document.body)

    def test_known_suffixes_get_metadata_cards(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            image = Path(tmp) / "photo.PNG"
            image.write_bytes(b"fake")
            archive = Path(tmp) / "bundle.zip"
            archive.write_bytes(b"fake")

            image_doc = build_file_preview(image)
            archive_doc = build_file_preview(archive)

            self.assertEqual(image_doc.kind, "image")
            self.assertIn("Format: PNG", image_doc.body)
            self.assertEqual(archive_doc.kind, "archive")

    def test_missing_file_becomes_error_document(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            document = build_file_preview(Path(tmp) / "gone.txt")

            self.assertEqual(document.kind, "error")
            self.assertIn("Error previewing file", document.body)


class NodePreviewTests(unittest.TestCase):
    def test_folder_and_action_nodes(self) -> None:
        folder = TreeNode("src", NodeKind.FOLDER, Path("/p/src"))
        action = TreeNode("Refresh", NodeKind.ACTION, Path("/p/@refresh"), description="Reload listing")

        self.assertEqual(build_preview(folder).kind, "folder")
        self.assertIn("/p/src", build_preview(folder).body)
        self.assertEqual(build_preview(action).body, "Reload listing")

    def test_help_lists_commands_and_limits(self) -> None:
        document = help_document(PreviewLimits(max_bytes=1024, max_lines=42))

        self.assertIn("/help", document.body)
        self.assertIn("/root", document.body)
        self.assertIn("File size limit: 1 KB", document.body)
        self.assertIn("Line limit: 42 lines", document.body)


if __name__ == "__main__":
    unittest.main()
