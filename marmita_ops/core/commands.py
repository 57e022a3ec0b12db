"""Command parser: decode the classifier's action code into a typed action.

Grammar: ACAO:<TAG> followed by optional |KEY:value segments.  The first
segment must be exactly one of the known tags; every required key must be
present and non-empty, and numbers must be finite and non-negative.
Anything else becomes Unrecognized.  parse_action() never raises.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Union

log = logging.getLogger(__name__)

TAG_PREFIX = "ACAO:"
TAG_UPDATE_COST = "ATUALIZAR_CUSTO"
TAG_REGISTER_SALE = "REGISTRAR_VENDA"
TAG_REPORT = "RELATORIO"
TAG_NOT_UNDERSTOOD = "NAO_ENTENDI"


@dataclass(frozen=True)
class UpdateCost:
    item: str
    value: float


@dataclass(frozen=True)
class RegisterSale:
    product: str
    value: float
    cost: float


@dataclass(frozen=True)
class Report:
    pass


@dataclass(frozen=True)
class Unrecognized:
    reason: str = ""


ParsedAction = Union[UpdateCost, RegisterSale, Report, Unrecognized]


class _Fault(Exception):
    """Malformed field; caught inside this module and turned into Unrecognized."""


def _clean(text: str) -> str:
    """Strip whitespace, ```code fences``` and wrapping quotes the model sometimes adds."""
    text = text.strip()
    match = re.fullmatch(r"```(?:\w+)?\s*([\s\S]*?)\s*```", text)
    if match:
        text = match.group(1)
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "`'\"":
        text = text[1:-1].strip()
    return text


def _fields(segments: list[str]) -> dict[str, str]:
    fields = {}
    for segment in segments:
        key, sep, value = segment.partition(":")
        if not sep:
            continue
        fields.setdefault(key.strip().upper(), value.strip())
    return fields


def _text(fields: dict, key: str) -> str:
    value = fields.get(key, "")
    if not value:
        raise _Fault(f"missing {key}")
    return value


def _number(fields: dict, key: str) -> float:
    raw = _text(fields, key)
    try:
        value = float(raw)
    except ValueError:
        raise _Fault(f"{key} is not a number: {raw!r}")
    if not math.isfinite(value) or value < 0:
        raise _Fault(f"{key} must be a non-negative number: {raw!r}")
    return value


def parse_action(text: str) -> ParsedAction:
    """Decode one classifier response into an action."""
    if not text:
        return Unrecognized("empty response")

    head, *rest = _clean(text).split("|")
    head = head.strip()
    if not head.startswith(TAG_PREFIX):
        return Unrecognized(f"no action tag in {text!r}")
    tag = head[len(TAG_PREFIX):].strip()
    fields = _fields(rest)

    try:
        if tag == TAG_UPDATE_COST:
            return UpdateCost(item=_text(fields, "ITEM"), value=_number(fields, "VALOR"))
        if tag == TAG_REGISTER_SALE:
            return RegisterSale(
                product=_text(fields, "PRODUTO"),
                value=_number(fields, "VALOR"),
                cost=_number(fields, "CUSTO"),
            )
        if tag == TAG_REPORT:
            return Report()
    except _Fault as e:
        log.info("Rejected %s action: %s", tag, e)
        return Unrecognized(str(e))

    if tag == TAG_NOT_UNDERSTOOD:
        return Unrecognized()
    return Unrecognized(f"unknown tag {tag!r}")
