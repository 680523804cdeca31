"""Tests for frame composition, the asyncio main loop, and terminal control."""

from __future__ import annotations

import asyncio
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from filescram.focus import Surface
from filescram.preview import message_document
from filescram.runtime.app import Navigator
from filescram.runtime.loop import run_main_loop, wait_readable
from filescram.runtime.render import FOOTER_HINT, FrameState, clip_text, pad_text, render_frame, tree_scroll_start
from filescram.runtime.terminal import ENTER_TUI, LEAVE_TUI, TerminalController
from filescram.tree_model import NodeKind, TreeRow
from filescram.ui_theme import DEFAULT_THEME, PLAIN_THEME


def frame_state(**overrides) -> FrameState:
    rows = [
        TreeRow(id=Path("/r"), depth=0, kind=NodeKind.FOLDER, label="r"),
        TreeRow(id=Path("/r/a.txt"), depth=1, kind=NodeKind.FILE, label="a.txt"),
    ]
    values = {
        "root": Path("/r"),
        "rows": rows,
        "expanded": {Path("/r")},
        "selected_index": 1,
        "focus": Surface.TREE,
        "preview": message_document("Preview", "hello\nworld"),
    }
    values.update(overrides)
    return FrameState(**values)


def screen_lines(frame: str) -> list[str]:
    return frame.removeprefix("\033[H\033[J").split("\r\n")


class RenderFrameTests(unittest.TestCase):
    def test_plain_frame_has_header_panes_and_footer(self) -> None:
        lines = screen_lines(render_frame(frame_state(), 60, 6, PLAIN_THEME))

        self.assertEqual(len(lines), 6)
        self.assertTrue(lines[0].startswith(" FILE SCRAM  /r"))
        self.assertTrue(lines[1].startswith("▶ Files"))
        self.assertIn("  Preview", lines[1])
        self.assertIn("▾  r", lines[2])
        self.assertIn("hello", lines[2])
        self.assertIn("·  a.txt", lines[3])
        self.assertEqual(lines[-1], pad_text(FOOTER_HINT, 60))
        self.assertTrue(all(len(line) == 60 for line in lines))

    def test_selected_row_is_reversed(self) -> None:
        frame = render_frame(frame_state(), 60, 6, DEFAULT_THEME)

        self.assertIn(DEFAULT_THEME.reverse + "  ·  a.txt", frame)

    def test_overlay_box_replaces_middle_rows(self) -> None:
        state = frame_state(
            overlay_visible=True,
            overlay_title="Search & Navigate",
            overlay_value="/he",
            overlay_help="Command mode",
            focus=Surface.OVERLAY,
        )

        lines = screen_lines(render_frame(state, 70, 12, PLAIN_THEME))

        box = [line for line in lines if "│" in line and "> /he" in line]
        self.assertEqual(len(box), 1)
        self.assertTrue(any("┌ Search & Navigate " in line for line in lines))
        self.assertEqual(lines[-1].rstrip(), "Command mode")

    def test_wide_characters_are_clipped_by_cell_width(self) -> None:
        self.assertEqual(clip_text("日本語", 5), "日本")
        self.assertEqual(pad_text("日本語", 5), "日本 ")

    def test_tree_scroll_keeps_selection_visible(self) -> None:
        self.assertEqual(tree_scroll_start(0, 50, 10), 0)
        self.assertEqual(tree_scroll_start(25, 50, 10), 16)
        self.assertEqual(tree_scroll_start(49, 50, 10), 40)
        self.assertEqual(tree_scroll_start(3, 5, 10), 0)


class FakeTerminal:
    def __init__(self) -> None:
        self.frames: list[str] = []

    def size(self) -> tuple[int, int]:
        return 80, 10

    def write(self, text: str) -> None:
        self.frames.append(text)


class MainLoopTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.read_fd, self.write_fd = os.pipe()
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        (root / "one.txt").write_text("1", encoding="utf-8")
        self.navigator = Navigator(root, theme=PLAIN_THEME)
        self.navigator.reroot(root)
        await self.navigator.shutdown()

    async def asyncTearDown(self) -> None:
        await self.navigator.shutdown()
        os.close(self.read_fd)
        os.close(self.write_fd)
        self._tmp.cleanup()

    async def test_loop_renders_dispatches_and_stops_on_quit(self) -> None:
        terminal = FakeTerminal()
        os.write(self.write_fd, b"jq")

        await asyncio.wait_for(run_main_loop(self.navigator, terminal, self.read_fd, poll_ms=10), timeout=5)

        self.assertFalse(self.navigator.running)
        self.assertGreaterEqual(len(terminal.frames), 2)
        self.assertEqual(self.navigator.tree.selected_row.label, "one.txt")

    async def test_wait_readable_times_out_without_input(self) -> None:
        self.assertFalse(await wait_readable(self.read_fd, 10))
        os.write(self.write_fd, b"x")
        self.assertTrue(await wait_readable(self.read_fd, 100))


class TerminalControllerTests(unittest.TestCase):
    def test_raw_mode_brackets_body_and_restores_on_error(self) -> None:
        with mock.patch("filescram.runtime.terminal.termios") as termios, mock.patch(
            "filescram.runtime.terminal.tty"
        ) as tty, mock.patch("filescram.runtime.terminal.os.write") as write:
            termios.tcgetattr.return_value = ["saved"]
            controller = TerminalController(0, 1)

            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        tty.setraw.assert_called_once()
        self.assertEqual([call.args for call in write.call_args_list], [(1, ENTER_TUI), (1, LEAVE_TUI)])
        termios.tcsetattr.assert_called_once_with(0, termios.TCSAFLUSH, ["saved"])


if __name__ == "__main__":
    unittest.main()
