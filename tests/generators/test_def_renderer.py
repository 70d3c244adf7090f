import os

from generators.def_renderer import DefRenderer, render_def
from tests.test_utils import expand_text

SOURCE_DEF = '''
/// Link status
@derive(Debug)
@from_to_other(base_type = u8, comparison_mode = "value-based")
pub enum Status {
    /// Link is down
    Down = 0,
    @deprecated
    Up = 1 << 1,
    Other(u8),
}

@derive(FromToRepr)
@repr(u8)
enum Color {
    Red = 1,
}

enum Shape { Point, Circle { radius: u32 }, Pair(u8, Vec<u16>) }

enum Empty {}
'''

EXPECTED_DEF = '''\
/// Link status
@derive(Debug)
pub enum Status {
    /// Link is down
    Down,
    @deprecated
    Up,
    Other(u8),
}

@derive(FromToRepr)
@repr(u8)
enum Color {
    Red = 1,
}

enum Shape {
    Point,
    Circle { radius: u32 },
    Pair(u8, Vec<u16>),
}

enum Empty {}
'''


def declarations(dsl):
    return [e.declaration for e in expand_text(dsl).expansions]


def test_render_expanded_declarations():
    assert render_def(declarations(SOURCE_DEF)) == EXPECTED_DEF


def test_rendered_declarations_reparse_to_the_same_text():
    rendered = render_def(declarations(SOURCE_DEF))
    assert render_def(declarations(rendered)) == rendered


def test_def_renderer_writes_file(temp_dir):
    renderer = DefRenderer(declarations(SOURCE_DEF), temp_dir, "status")
    assert renderer.generate()
    assert renderer.output_path == os.path.join(temp_dir, "status_expanded.def")
    with open(renderer.output_path, encoding="utf-8") as f:
        assert f.read() == EXPECTED_DEF
