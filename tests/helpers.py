"""Shared test data and utilities."""

from __future__ import annotations

import sys
import textwrap
from pathlib import Path

from wit_lsp.config import Settings

WORLD_WIT = """\
package example:types@0.1.0;

interface types {
  type type1 = u32;
  type type2 = string;
  type type3 = list<u8>;
}

world example {
  use types.{type1, type2, type3};
  export foo: func() -> tuple<type1, type2, type3, type4>;
}
"""

UNDEFINED_TYPE_REPORT = """\
error: undefined type `type4`
  --> world.wit:11:45
   |
11 |   export foo: func() -> tuple<type1, type2, type3, type4>;
   |                                             ^----
"""


def write_fake_validator(directory: Path, report: str | bytes = "", exit_code: int = 1) -> Settings:
    """Write a script that prints *report* on stderr; return Settings running it.

    The fake runs under the current interpreter, so tests do not depend on
    ``wasm-tools`` being installed.
    """
    script = directory / "fake_validator.py"
    if isinstance(report, bytes):
        write = f"sys.stderr.buffer.write({report!r})"
    else:
        write = f"sys.stderr.write({report!r})"
    script.write_text(
        textwrap.dedent(
            f"""\
            import sys
            {write}
            sys.stderr.flush()
            sys.exit({exit_code})
            """
        ),
        encoding="utf-8",
    )
    return Settings(validator_command=(sys.executable, str(script)))
