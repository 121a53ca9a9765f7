"""Rendering of prompt templates.

A template holds plain text and ``{...}`` expressions:

- ``{var}`` is replaced with the value of ``var``;
- ``{?var <template>}`` renders ``template`` when ``var`` is truthy;
- ``{!var <template>}`` renders ``template`` when ``var`` is falsy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Union


@dataclass
class _Text:
    text: str


@dataclass
class _Variable:
    name: str


@dataclass
class _Block:
    when_true: bool
    name: str
    body: list[_Expr] = field(default_factory=list)


_Expr = Union[_Text, _Variable, _Block]


def render_prompt(template: str, variables: Mapping[str, str]) -> str:
    return _evaluate(_parse_template(template), variables)


def _parse_template(template: str) -> list[_Expr]:
    exprs: list[_Expr] = []
    current: list[str] = []
    depth = 0
    for ch in template:
        if depth:
            if ch == "}":
                depth -= 1
                if depth == 0:
                    if current:
                        exprs.append(_parse_block("".join(current)))
                        current.clear()
                else:
                    current.append(ch)
            else:
                if ch == "{":
                    depth += 1
                current.append(ch)
        elif ch == "{":
            depth += 1
            _flush_text(exprs, current)
        else:
            current.append(ch)
    _flush_text(exprs, current)
    return exprs


def _parse_block(value: str) -> _Expr:
    name, sep, tail = value.partition(" ")
    if not sep:
        return _Variable(value)
    if name.startswith("?"):
        return _Block(True, name[1:], _parse_template(tail))
    if name.startswith("!"):
        return _Block(False, name[1:], _parse_template(tail))
    return _Text(f"{{{value}}}")


def _flush_text(exprs: list[_Expr], current: list[str]) -> None:
    if current:
        exprs.append(_Text("".join(current)))
        current.clear()


def _truthy(value: str) -> bool:
    return value not in ("", "0", "false")


def _evaluate(exprs: list[_Expr], variables: Mapping[str, str]) -> str:
    output = []
    for expr in exprs:
        if isinstance(expr, _Text):
            output.append(expr.text)
        elif isinstance(expr, _Variable):
            output.append(variables.get(expr.name, ""))
        elif _truthy(variables.get(expr.name, "")) == expr.when_true:
            output.append(_evaluate(expr.body, variables))
    return "".join(output)