import re

import pytest

from gocov.profile import Profile, ProfileBlock

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text):
    return ANSI_RE.sub("", text)


def block(start, end, count, num_stmt=1):
    return ProfileBlock(start, 1, end, 1, num_stmt, count)


@pytest.fixture
def eight_lines():
    return "".join(f"line{i}\n" for i in range(1, 9))


@pytest.fixture
def go_source(tmp_path):
    src = (
        "package demo\n"
        "\n"
        "// Add adds.\n"
        "func Add(a, b int) int {\n"
        "\treturn a + b\n"
        "}\n"
        "\n"
        "func Sub(a, b int) int {\n"
        "\treturn a - b\n"
        "}\n"
    )
    path = tmp_path / "demo.go"
    path.write_text(src)
    return path


@pytest.fixture
def demo_profile(go_source):
    return Profile(str(go_source), "set", [block(4, 7, 1), block(8, 11, 0)])
