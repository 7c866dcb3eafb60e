import numpy as np
import pytest

from bmp2ansi.errors import OddHeight
from bmp2ansi.framebuffer import Framebuffer
from bmp2ansi.rendering.ansi import RESET, bg_color, color_hex, fg_color
from bmp2ansi.rendering.halfblock import (
    BLOCK_BOTTOM,
    BLOCK_TOP,
    SPACE,
    HalfBlockRenderer,
    render_framebuffer,
    render_row,
)

RED = 0xFFFF0000
BLACK = 0xFF000000
WHITE = 0xFFFFFFFF
DIM = 0xFF0A0A0A

ESC = "\x1b"


def make_fb(rows):
    fb = Framebuffer(len(rows[0]), len(rows))
    for y, row in enumerate(rows):
        for x, color in enumerate(row):
            fb.set_pixel(x, y, color)
    return fb


def test_escape_sequences() -> None:
    assert RESET == ESC + "[0m"
    assert fg_color(RED) == ESC + "[38;5;196m"
    assert bg_color(BLACK) == ESC + "[48;5;16m"
    assert BLOCK_TOP == "▀"
    assert BLOCK_BOTTOM == "▄"


def test_color_hex_drops_alpha_and_pads() -> None:
    assert color_hex(0xFF00000A) == "00000a"
    assert color_hex(0x12ABCDEF) == "abcdef"
    assert color_hex(0) == "000000"


def test_both_dim_cells_are_blank() -> None:
    fb = make_fb([[DIM, BLACK], [BLACK, DIM]])
    assert render_row(fb, 0, 0.1) == (RESET + SPACE) * 2 + RESET


def test_intensity_equal_to_cutoff_is_blank() -> None:
    fb = make_fb([[0xFF808080], [BLACK]])
    cutoff = fb.get_pixel_as_gray(0, 0) / 255
    assert render_row(fb, 0, cutoff) == RESET + SPACE + RESET
    # just below it the top half is drawn
    assert render_row(fb, 0, cutoff - 1e-6).endswith(BLOCK_TOP + RESET)


def test_cutoff_zero_still_draws_dim_pixels() -> None:
    fb = make_fb([[DIM], [BLACK]])
    assert render_row(fb, 0, 0.0) == fg_color(DIM) + bg_color(BLACK) + BLOCK_TOP + RESET


def test_brighter_top_uses_upper_block() -> None:
    fb = make_fb([[RED], [BLACK]])
    assert render_row(fb, 0, 0.1) == ESC + "[38;5;196m" + ESC + "[48;5;16m" + BLOCK_TOP + RESET


def test_brighter_bottom_uses_lower_block() -> None:
    fb = make_fb([[BLACK], [WHITE]])
    assert render_row(fb, 0, 0.1) == ESC + "[38;5;231m" + ESC + "[48;5;16m" + BLOCK_BOTTOM + RESET


def test_tie_favors_top() -> None:
    fb = make_fb([[WHITE], [WHITE]])
    assert render_row(fb, 0, 0.1) == fg_color(WHITE) + bg_color(WHITE) + BLOCK_TOP + RESET


def test_red_black_columns_render_end_to_end() -> None:
    fb = make_fb([[RED, BLACK], [RED, BLACK]])
    out = render_framebuffer(fb, 0.1)
    assert out == (
        ESC + "[38;5;196m" + ESC + "[48;5;196m" + BLOCK_TOP
        + RESET + SPACE
        + RESET + "\n"
    )


def test_transparent_column_renders_blank() -> None:
    fb = Framebuffer(1, 2)
    fb.set_pixel(0, 0, 0x00000000)
    fb.set_pixel(0, 1, 0x00000000)
    fb.render_alpha(0x00000000)
    assert render_framebuffer(fb, 0.1) == RESET + SPACE + RESET + "\n"


def test_one_line_per_row_pair() -> None:
    fb = Framebuffer(3, 6)
    out = render_framebuffer(fb, 0.1)
    lines = out.split("\n")
    assert len(lines) == 4 and lines[-1] == ""
    assert all(line == (RESET + SPACE) * 3 + RESET for line in lines[:-1])


def test_odd_height_pads_with_transparent_row() -> None:
    fb = make_fb([[WHITE, BLACK], [BLACK, WHITE], [WHITE, DIM]])
    out = render_framebuffer(fb, 0.1)
    lines = out.split("\n")
    assert len(lines) == 3
    assert lines[1] == fg_color(WHITE) + bg_color(0) + BLOCK_TOP + RESET + SPACE + RESET


def test_odd_height_error_policy() -> None:
    fb = make_fb([[WHITE], [WHITE], [WHITE]])
    with pytest.raises(OddHeight):
        render_framebuffer(fb, 0.1, odd_height="error")
    with pytest.raises(OddHeight):
        render_row(fb, 2, 0.1, odd_height="error")
    # full pairs are still fine
    assert render_row(fb, 0, 0.1, odd_height="error").endswith(BLOCK_TOP + RESET)


def test_unknown_odd_height_policy() -> None:
    fb = Framebuffer(1, 2)
    with pytest.raises(ValueError):
        render_framebuffer(fb, 0.1, odd_height="crop")
    with pytest.raises(ValueError):
        HalfBlockRenderer(odd_height="crop")


def test_rendering_does_not_mutate() -> None:
    fb = make_fb([[RED, 0x80FFFFFF], [DIM, WHITE]])
    before = fb.pixels.copy()
    render_framebuffer(fb, 0.1)
    assert np.array_equal(fb.pixels, before)


def test_quantizer_receives_lowercase_hex() -> None:
    seen = []

    def quantizer(hex_color):
        seen.append(hex_color)
        return 7

    fb = make_fb([[0xFF00000A], [0x80ABCDEF]])
    line = render_row(fb, 0, 0.0, quantizer=quantizer)
    assert seen == ["abcdef", "00000a"]
    assert line == ESC + "[38;5;7m" + ESC + "[48;5;7m" + BLOCK_BOTTOM + RESET


def test_renderer_object_matches_functions() -> None:
    fb = make_fb([[RED, WHITE, DIM], [BLACK, BLACK, DIM]])
    renderer = HalfBlockRenderer(cutoff=0.1)
    assert renderer.name == "halfblock"
    assert renderer.render(fb) == render_framebuffer(fb, 0.1)
    assert renderer.render_row(fb, 0) == render_row(fb, 0, 0.1)
