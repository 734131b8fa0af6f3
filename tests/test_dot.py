from unittest import mock

import pytest

from makedot.dot import render_png, render_targets, render_variables, write_dot
from makedot.parser import MakeData

HEADER = 'digraph gnumake {\n    node[shape=rect;style="rounded,bold"]; {\n'
FOOTER = "    }\n}\n\n"


def simple_data():
    return MakeData(
        goal="all",
        tgt_deps={
            "all": ["main.o", "util.o"],
            "main.o": ["main.c"],
            "util.o": ["util.c"],
        },
        phony_targets={"all"},
    )


def test_render_targets_worked_example():
    out = render_targets(simple_data(), 3, [])
    expected = (
        HEADER
        + '\t"all" [ color=red,style="rounded,filled" ];\n'
        + '\t"main.o" [ color=orange ];\n'
        + '\t"main.o" -> "all";\n'
        + '\t"main.c" -> "main.o";\n'
        + '\t"util.o" [ color=orange ];\n'
        + '\t"util.o" -> "all";\n'
        + '\t"util.c" -> "util.o";\n'
        + FOOTER
    )
    assert out == expected


def test_header_and_footer_wrap_output():
    out = render_targets(MakeData(goal="x"), 3, [])
    assert out.startswith(HEADER)
    assert out.endswith(FOOTER)


def test_each_node_colour_written_once():
    out = render_targets(simple_data(), 3, [])
    assert out.count('"all" [') == 1
    assert out.count('"main.o" [') == 1


def test_duplicate_edges_are_emitted_once():
    data = MakeData(goal="all", tgt_deps={"all": ["x", "x"]})
    out = render_targets(data, 3, [])
    assert out.count('\t"x" -> "all";\n') == 1


def test_collapse_beyond_maxthreads():
    data = MakeData(
        goal="all",
        tgt_deps={"all": ["a", "b", "c", "d", "e"], **{n: ["z"] for n in "abcde"}},
    )
    out = render_targets(data, 3, [])
    assert "color=blue" in out
    assert "c,d...\n3 items]" in out
    assert '"a" -> "all"' in out
    assert '"b" -> "all"' in out
    assert '"d" -> "all"' not in out
    assert '"e" -> "all"' not in out
    assert out.count('-> "all";') == 3


def test_zero_maxthreads_draws_everything():
    data = MakeData(
        goal="all",
        tgt_deps={"all": ["a", "b", "c", "d", "e"], **{n: ["z"] for n in "abcde"}},
    )
    out = render_targets(data, 0, [])
    assert "items]" not in out
    for name in "abcde":
        assert f'"{name}" -> "all";' in out
        assert f'"z" -> "{name}";' in out


def test_threads_with_shared_vertex_are_kept():
    data = MakeData(
        goal="all",
        tgt_deps={"all": ["a", "b"], "a": ["s"], "b": ["s"], "s": ["leaf"]},
    )
    out = render_targets(data, 1, [])
    assert "items]" not in out
    assert '"a" -> "all"' in out
    assert '"b" -> "all"' in out
    assert out.count('"leaf" -> "s";') == 1


def test_nodraw_skips_matching_threads():
    out = render_targets(simple_data(), 3, ["util"])
    assert "util" not in out
    assert '"main.c" -> "main.o";' in out


def test_target_styles():
    data = MakeData(
        goal="top",
        tgt_deps={"top": ["gen", "leafy", "fake"], "gen": ["src"], "leafy": [], "fake": []},
        intermediate_targets={"gen"},
        phony_targets={"fake"},
    )
    out = render_targets(data, 3, [])
    assert '"top" [ color=red ];' in out
    assert '"gen" [ color=orange,style=dashed ];' in out
    assert '"leafy" [ color=green ];' in out
    assert '"fake" [ color=green,style="rounded,filled" ];' in out


def test_render_variables_handles_cycles():
    data = MakeData(
        goal="all",
        var_deps={"all": ["CC", "CFLAGS"], "CFLAGS": ["OPT"], "OPT": ["CFLAGS"]},
    )
    out = render_variables(data)
    assert out.startswith(HEADER) and out.endswith(FOOTER)
    body = out[len(HEADER) : -len(FOOTER)].splitlines()
    assert body == [
        '\t"CC" -> "all";',
        '\t"CFLAGS" -> "all";',
        '\t"OPT" -> "CFLAGS";',
        '\t"CFLAGS" -> "OPT";',
    ]


def test_render_variables_without_goal_entry_is_empty():
    out = render_variables(MakeData(goal="all", var_deps={"X": ["Y"]}))
    assert out == HEADER + FOOTER


def test_write_dot_round_trip(tmp_path):
    path = tmp_path / "g.dot"
    text = render_targets(simple_data(), 3, [])
    write_dot(str(path), text)
    assert path.read_text(encoding="utf-8") == text


def test_render_png_writes_png_next_to_dot(tmp_path):
    dot_path = tmp_path / "all.targets.dot"
    write_dot(str(dot_path), render_targets(simple_data(), 3, []))
    calls = []

    def fake_run(args, *rest, **kwargs):
        calls.append(list(args))
        out_path = args[args.index("-o") + 1]
        with open(out_path, "wb") as fh:
            fh.write(b"\x89PNG")
        return mock.Mock(returncode=0)

    with mock.patch("makedot.dot.subprocess.run", side_effect=fake_run):
        render_png(str(dot_path))

    png_path = tmp_path / "all.targets.png"
    assert calls == [["dot", "-Tpng", str(dot_path), "-o", str(png_path)]]
    assert png_path.read_bytes() == b"\x89PNG"


def test_render_png_missing_program_raises():
    with mock.patch("makedot.dot.subprocess.run", side_effect=FileNotFoundError("dot")):
        with pytest.raises(FileNotFoundError):
            render_png("g.dot")