from __future__ import annotations

import random
import string


_LINE_BREAKS = ["\n", "\n", "\r\n", "\r"]
_INDENT_UNITS = [" ", "  ", "    ", "\t"]
_WIDE = ["é", "ß", "λ", "Ж", "世", "界", "€", "😀", "𝄞"]
_PUNCT = list("()[]{}:;,.=+-*/<>\"'#")


def generate_texts(*, seed: int, count: int) -> list[str]:
    """Generate source-like texts mixing tabs, spaces, line break styles and non-ASCII text."""
    r = random.Random(seed)
    return [_gen_one(r) for _ in range(count)]


def generate_corpus_files(*, seed: int, count: int) -> list[tuple[str, str]]:
    """Generate a deterministic corpus as a *file set*.

    Returns a list of (relative_path, text). File names are stable:
    `case_000000.txt`, ...
    """
    names = [f"case_{i:06d}.txt" for i in range(count)]
    return list(zip(names, generate_texts(seed=seed, count=count)))


def _gen_one(r: random.Random) -> str:
    parts: list[str] = []
    for _ in range(r.randint(0, 12)):
        parts.append(_gen_line(r))
        parts.append(r.choice(_LINE_BREAKS))
    if r.random() < 0.5:
        # Last line without a trailing break.
        parts.append(_gen_line(r))
    return "".join(parts)


def _gen_line(r: random.Random) -> str:
    if r.random() < 0.1:
        return ""
    indent = "".join(r.choice(_INDENT_UNITS) for _ in range(r.randint(0, 3)))
    words = [_word(r) for _ in range(r.randint(1, 6))]
    out = indent
    for i, w in enumerate(words):
        if i > 0:
            out += r.choice([" ", " ", "\t", "  "])
        out += w
    if r.random() < 0.2:
        out += r.choice([" ", "\t", "  "])
    return out


def _word(r: random.Random) -> str:
    alphabet = string.ascii_letters + string.digits + "_"
    chars = [r.choice(alphabet) for _ in range(r.randint(1, 10))]
    if r.random() < 0.3:
        chars.insert(r.randrange(len(chars) + 1), r.choice(_WIDE))
    if r.random() < 0.3:
        chars.append(r.choice(_PUNCT))
    return "".join(chars)
