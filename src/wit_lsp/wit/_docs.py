"""Hover documentation for WIT keywords, built-in types and punctuation."""

from __future__ import annotations

from ._tokenizer import TokenKind

PACKAGE = """\
**package**

WIT packages are the unit of sharing types and definitions in an ecosystem of
components. A package is named `namespace:name`, optionally followed by a
`@version`, and groups a set of interfaces and worlds.

```wit
package wasi:clocks@0.2.0;
```

Authors can import types from other packages when generating a component,
publish a package describing a host embedding, or collaborate on a shared set
of APIs between platforms."""

WORLD = """\
**world**

A world is a complete description of both the imports and the exports of a
component. It plays the role of a `component` type in the component model and
is the basis of bindings generation: a guest language uses a world to decide
which functions are imported, what they are named, and which are exported.

```wit
world my-world {
  import host: interface {
    log: func(param: string);
  }

  export run: func();
}
```

Worlds can import and export any number of functions and interfaces.
Interfaces can also be defined inline as sugar for a top-level definition."""

INTERFACE = """\
**interface**

An interface is a named collection of functions and types. It corresponds to
an instance in the WebAssembly component model, for example a unit of
functionality imported from the host or implemented by a component. Every
function and type belongs to an interface.

```wit
interface host {
  log: func(msg: string);
}
```

An interface can contain `use` statements, `type` definitions and function
definitions:

```wit
interface wasi-fs {
  use types.{errno};

  record stat {
    ino: u64,
    size: u64,
  }

  stat-file: func(path: string) -> result<stat, errno>;
}
```"""

TYPE = """\
**type**

Types are defined inside interfaces. WIT supports the same set of types as the
component model itself:

```wit
interface foo {
  record r { a: u32, b: string }
  variant human { baby, child(u32), adult }
  enum errno { too-big, too-small }
  flags permissions { read, write, exec }

  type t1 = u32;
  type t2 = tuple<u32, u64>;
  type t3 = option<u32>;
  type t4 = result<_, errno>;
  type t5 = list<string>;
}
```

`record`, `variant`, `enum` and `flags` types must be named. `list`, `option`,
`result`, `tuple` and the primitive types can be used anywhere without a name."""

RECORD = """\
**record**

A `record` declares a named structure with named fields, similar to a
`struct` in many languages. Instances of a record always have every field set.

```wit
record pair {
  x: u32,
  y: u32,
}
```"""

FUNC = """\
**func**

Functions are defined in an `interface` or listed as an `import` or `export`
of a `world`. Parameters must all be named and the names must be unique.

```wit
interface foo {
  a1: func();
  a2: func(x: u32);
  a3: func(y: u64, z: f32) -> string;
}
```

A function returns at most one type; returning a `tuple` is the way to return
several values."""

USE = """\
**use**

A `use` statement imports type or resource definitions from another interface,
in the same package or in a dependency:

```wit
use types.{errno, stat};
use wasi:io/streams@0.2.0.{input-stream};
```"""

DOCS: dict[TokenKind, str] = {
    TokenKind.PACKAGE: PACKAGE,
    TokenKind.WORLD: WORLD,
    TokenKind.INTERFACE: INTERFACE,
    TokenKind.TYPE: TYPE,
    TokenKind.RECORD: RECORD,
    TokenKind.FUNC: FUNC,
    TokenKind.USE: USE,
    TokenKind.IMPORT: "The `import` keyword: a function or interface the component requires.",
    TokenKind.EXPORT: "The `export` keyword: a function or interface the component provides.",
    TokenKind.RESOURCE: "The `resource` keyword: an abstract handle type with methods.",
    TokenKind.FLAGS: "The `flags` keyword: a named set of boolean flags.",
    TokenKind.VARIANT: "The `variant` keyword: a tagged union whose cases may carry a payload.",
    TokenKind.ENUM: "The `enum` keyword: a variant whose cases carry no payload.",
    TokenKind.UNION: "The `union` keyword: a variant with unnamed cases, each carrying a type.",
    TokenKind.SHARED: "The `shared` keyword.",
    TokenKind.STATIC: "The `static` keyword: a resource function that takes no `self`.",
    TokenKind.AS: "The `as` keyword: renames an item brought in by `use` or `include`.",
    TokenKind.FROM: "The `from` keyword.",
    TokenKind.INCLUDE: "The `include` keyword: merges another world into this one.",
    TokenKind.WITH: "The `with` keyword: renames items while including a world.",
    TokenKind.CONSTRUCTOR: "The `constructor` keyword: creates a new resource instance.",
    TokenKind.U8: "An unsigned 8-bit integer.",
    TokenKind.U16: "An unsigned 16-bit integer.",
    TokenKind.U32: "An unsigned 32-bit integer.",
    TokenKind.U64: "An unsigned 64-bit integer.",
    TokenKind.S8: "A signed 8-bit integer.",
    TokenKind.S16: "A signed 16-bit integer.",
    TokenKind.S32: "A signed 32-bit integer.",
    TokenKind.S64: "A signed 64-bit integer.",
    TokenKind.F32: "A 32-bit floating point number.",
    TokenKind.F64: "A 64-bit floating point number.",
    TokenKind.FLOAT32: "A 32-bit floating point number.",
    TokenKind.FLOAT64: "A 64-bit floating point number.",
    TokenKind.CHAR: "A single Unicode scalar value.",
    TokenKind.BOOL: "A boolean value.",
    TokenKind.STRING: "A UTF-8 encoded string.",
    TokenKind.OPTION: "A type that may or may not contain a value.",
    TokenKind.RESULT: "A type that holds either a value or an error.",
    TokenKind.FUTURE: "A value that becomes available in the future.",
    TokenKind.STREAM: "A stream of values.",
    TokenKind.LIST: "A list of values.",
    TokenKind.TUPLE: "A fixed-size sequence of values of possibly different types.",
    TokenKind.OWN: "An owned handle to a resource.",
    TokenKind.BORROW: "A borrowed handle to a resource.",
    TokenKind.UNDERSCORE: "A placeholder for an absent type, as in `result<_, error>`.",
    TokenKind.INTEGER: "An integer literal.",
    TokenKind.R_ARROW: "The right arrow operator.",
    TokenKind.PERIOD: "The period operator.",
    TokenKind.COLON: "The colon operator.",
    TokenKind.SLASH: "The slash operator.",
    TokenKind.COMMA: "The comma operator.",
    TokenKind.AT: "The at operator.",
    TokenKind.MINUS: "The minus operator.",
    TokenKind.PLUS: "The plus operator.",
    TokenKind.EQUALS: "The equals operator.",
    TokenKind.SEMICOLON: "The semicolon operator.",
    TokenKind.LEFT_PAREN: "The left parenthesis operator.",
    TokenKind.RIGHT_PAREN: "The right parenthesis operator.",
    TokenKind.LEFT_BRACE: "The left brace operator.",
    TokenKind.RIGHT_BRACE: "The right brace operator.",
    TokenKind.LESS_THAN: "The less than operator.",
    TokenKind.GREATER_THAN: "The greater than operator.",
    TokenKind.STAR: "The star operator.",
}
