"""
Expression and statement builder for generated engine programs.

Section writers never concatenate program text themselves. They build small
trees of expression nodes (``Call``, ``Var``, ``ListOf`` ...) and statement
nodes (``Assign``, ``Def`` ...) and hand them to a ``ProgramBuffer``, which
owns the single serializer. Plain Python values are rendered as engine
literals; every plain ``str`` becomes a double-quoted literal and passes
through ``clean_up_string`` on the way, so user-supplied text is sanitized
in exactly one place.

Example:
    >>> buf = ProgramBuffer()
    >>> buf.append(Assign("radio", Call("single", "/tmp/a.mp3", id="intro")))
    >>> buf.render()
    'radio = single(id="intro", "/tmp/a.mp3")'
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, Union

from ..infra.exceptions import UndefinedReferenceError

INDENT = "  "


def clean_up_string(value: Any) -> str:
    """Make a user-supplied value safe to embed inside a double-quoted literal.

    Double quotes become apostrophes and CR/LF are removed. This is a narrow
    injection guard, not a general escaper.
    """
    if value is None:
        return ""
    return str(value).replace('"', "'").replace("\n", "").replace("\r", "")


def to_float(number: float, decimals: int = 2) -> str:
    """Render a number as an engine float literal (``2`` -> ``2.``, ``1.5`` -> ``1.50``)."""
    if int(number) == number:
        return f"{int(number)}."
    return f"{number:.{decimals}f}"


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


class Expr:
    """Base class for expression nodes."""

    def render(self) -> str:
        raise NotImplementedError

    def references(self) -> Iterator[str]:
        """Names of pipeline variables this expression reads."""
        return iter(())

    def __str__(self) -> str:
        return self.render()


Value = Union[Expr, str, bool, int, float]


def render_value(value: Value) -> str:
    """Serialize an expression node or plain Python value."""
    if isinstance(value, Expr):
        return value.render()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return to_float(value)
    if isinstance(value, str):
        return f'"{clean_up_string(value)}"'
    raise TypeError(f"Cannot render {type(value).__name__} into a program")


def _references(value: Value) -> Iterator[str]:
    if isinstance(value, Expr):
        yield from value.references()


@dataclass(frozen=True)
class Raw(Expr):
    """Trusted program text emitted as-is."""

    code: str

    def render(self) -> str:
        return self.code


@dataclass(frozen=True)
class Var(Expr):
    """Reference to a pipeline variable assigned earlier in the program."""

    name: str

    def render(self) -> str:
        return self.name

    def references(self) -> Iterator[str]:
        yield self.name


@dataclass(frozen=True)
class Str(Expr):
    """Sanitized string literal usable where an expression node is required."""

    value: str

    def render(self) -> str:
        return render_value(self.value)


@dataclass(frozen=True)
class Deref(Expr):
    """Read of a reference cell, ``!name``."""

    ref: Var

    def render(self) -> str:
        return f"!{self.ref.render()}"

    def references(self) -> Iterator[str]:
        yield from self.ref.references()


class Call(Expr):
    """Function application. Labelled arguments render before positional ones."""

    def __init__(self, func: str, *args: Value, **kwargs: Value) -> None:
        self.func = func
        self.args = list(args)
        self.kwargs = dict(kwargs)

    def render(self) -> str:
        parts = [f"{key}={render_value(val)}" for key, val in self.kwargs.items()]
        parts.extend(render_value(arg) for arg in self.args)
        return f"{self.func}({', '.join(parts)})"

    def references(self) -> Iterator[str]:
        for val in self.kwargs.values():
            yield from _references(val)
        for arg in self.args:
            yield from _references(arg)

    def __repr__(self) -> str:
        return f"Call({self.render()!r})"


class ListOf(Expr):
    def __init__(self, items: Iterable[Value]) -> None:
        self.items = list(items)

    def render(self) -> str:
        return "[" + ", ".join(render_value(item) for item in self.items) + "]"

    def references(self) -> Iterator[str]:
        for item in self.items:
            yield from _references(item)


@dataclass(frozen=True)
class Pair(Expr):
    first: Value
    second: Value

    def render(self) -> str:
        return f"({render_value(self.first)}, {render_value(self.second)})"

    def references(self) -> Iterator[str]:
        yield from _references(self.first)
        yield from _references(self.second)


@dataclass(frozen=True)
class Thunk(Expr):
    """Delayed expression. Schedule predicates render padded, ``{ body }``;
    ``compact=True`` gives ``{body}`` for the constant switch guards."""

    body: Value
    compact: bool = False

    def render(self) -> str:
        inner = render_value(self.body)
        if self.compact:
            return "{" + inner + "}"
        return "{ " + inner + " }"

    def references(self) -> Iterator[str]:
        yield from _references(self.body)


class Encoder(Expr):
    """Encoder format literal, e.g. ``%mp3(bitrate=128)``."""

    def __init__(self, name: str, **params: Value) -> None:
        self.name = name
        self.params = dict(params)

    def render(self) -> str:
        inner = ", ".join(f"{key}={render_value(val)}" for key, val in self.params.items())
        return f"%{self.name}({inner})"

    def __repr__(self) -> str:
        return f"Encoder({self.render()!r})"


class Concat(Expr):
    """String built at engine run time: literal text interleaved with quoted expressions.

    Renders as ``"text"^quote(expr)^"text"`` so runtime values are quoted by
    the engine rather than interpolated here.
    """

    def __init__(self, *parts: str | Expr) -> None:
        self.parts = list(parts)

    def render(self) -> str:
        out = ['"']
        for part in self.parts:
            if isinstance(part, Expr):
                out.append(f'"^quote({part.render()})^"')
            else:
                out.append(clean_up_string(part))
        out.append('"')
        return "".join(out)


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


class Statement:
    def lines(self) -> list[str]:
        raise NotImplementedError

    def references(self) -> Iterator[str]:
        return iter(())

    def defines(self) -> Iterator[str]:
        return iter(())


@dataclass
class Comment(Statement):
    text: str

    def lines(self) -> list[str]:
        return [f"# {clean_up_string(self.text)}"]


@dataclass
class Blank(Statement):
    def lines(self) -> list[str]:
        return [""]


@dataclass
class Assign(Statement):
    name: str
    value: Value

    def lines(self) -> list[str]:
        return [f"{self.name} = {render_value(self.value)}"]

    def references(self) -> Iterator[str]:
        yield from _references(self.value)

    def defines(self) -> Iterator[str]:
        yield self.name


@dataclass
class Line(Statement):
    """Expression evaluated for its side effect, e.g. ``ignore(x)``."""

    expr: Expr

    def lines(self) -> list[str]:
        return [self.expr.render()]

    def references(self) -> Iterator[str]:
        yield from self.expr.references()


@dataclass
class Setting(Statement):
    key: str
    value: Value

    def lines(self) -> list[str]:
        return [f'set("{clean_up_string(self.key)}", {render_value(self.value)})']


@dataclass
class SetEnv(Statement):
    key: str
    value: str

    def lines(self) -> list[str]:
        return [f"setenv({render_value(self.key)}, {render_value(self.value)})"]


@dataclass
class If(Statement):
    condition: str
    body: list[Statement] = field(default_factory=list)

    def lines(self) -> list[str]:
        out = [f"if ({self.condition}) then"]
        for stmt in self.body:
            out.extend(INDENT + line for line in stmt.lines())
        out.append("end")
        return out


@dataclass
class Def(Statement):
    """Function definition. Its body is local; only the name is visible outside."""

    name: str
    params: list[str] = field(default_factory=list)
    body: list[Statement] = field(default_factory=list)

    def lines(self) -> list[str]:
        out = [f"def {self.name}({','.join(self.params)}) ="]
        for stmt in self.body:
            out.extend(INDENT + line for line in stmt.lines())
        out.append("end")
        return out

    def defines(self) -> Iterator[str]:
        yield self.name


@dataclass
class Verbatim(Statement):
    """Trusted free-form program text appended without sanitization."""

    text: str

    def lines(self) -> list[str]:
        return self.text.splitlines() or [""]


# ---------------------------------------------------------------------------
# Buffer
# ---------------------------------------------------------------------------


class ProgramBuffer:
    """Ordered program statements for one synthesis pass.

    Appends are checked so that every ``Var`` read by a top-level statement
    was assigned by an earlier statement. ``known`` seeds names the engine
    provides or that are assigned outside the checked statements.
    """

    def __init__(self, known: Iterable[str] = ()) -> None:
        self._head: list[Statement] = []
        self._body: list[Statement] = []
        self._defined: set[str] = set(known)

    @property
    def defined(self) -> frozenset[str]:
        return frozenset(self._defined)

    def is_defined(self, name: str) -> bool:
        return name in self._defined

    def append(self, *statements: Statement) -> None:
        for stmt in statements:
            for name in stmt.references():
                if name not in self._defined:
                    raise UndefinedReferenceError(name)
            self._defined.update(stmt.defines())
            self._body.append(stmt)

    def prepend(self, *statements: Statement) -> None:
        """Insert statements at the very top. Only non-referencing statements are accepted."""
        for stmt in statements:
            if any(True for _ in stmt.references()):
                raise ValueError("Prepended statements must not reference variables")
        self._head[0:0] = statements

    def statements(self) -> list[Statement]:
        return [*self._head, *self._body]

    def lines(self) -> list[str]:
        out: list[str] = []
        for stmt in self.statements():
            out.extend(stmt.lines())
        return out

    def render(self) -> str:
        return "\n".join(self.lines())
