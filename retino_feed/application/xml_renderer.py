"""Serializes the Retino feed structure into an XML document."""

import re
import xml.etree.ElementTree as ET
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_ELEMENT_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")
# Characters XML 1.0 does not allow anywhere in a document
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")

# Quantities keep more decimals than money amounts
QUANTITY_ELEMENTS = frozenset({"AMOUNT", "WEIGHT", "VAT_RATE"})


class XmlRenderError(ValueError):
    """Raised when the structure handed to the renderer is malformed."""


class XmlRenderer:
    """Maps nested mappings onto XML elements of the same name.

    - a mapping becomes an element with one child per key
    - a list becomes an element whose children are the single-key mappings it holds
    - ``None`` becomes an empty element
    - characters XML 1.0 forbids are dropped from text
    """

    def __init__(
        self,
        float_precision: int = 2,
        quantity_precision: int = 4,
        indent: str | None = "  ",
    ) -> None:
        self._quantum = Decimal(1).scaleb(-float_precision)
        self._quantity_quantum = Decimal(1).scaleb(-quantity_precision)
        self._indent = indent

    def render(self, structure: dict[str, Any]) -> str:
        root_name, root_value = self._single_entry(structure, "document root")
        root = ET.Element(self._element_name(root_name))
        self._fill(root, root_value)

        if self._indent is not None:
            ET.indent(root, space=self._indent)

        return XML_DECLARATION + "\n" + ET.tostring(root, encoding="unicode") + "\n"

    def _fill(self, element: ET.Element, value: Any) -> None:
        if isinstance(value, dict):
            for key, child_value in value.items():
                child = ET.SubElement(element, self._element_name(key))
                self._fill(child, child_value)
        elif isinstance(value, (list, tuple)):
            for entry in value:
                key, child_value = self._single_entry(entry, f"<{element.tag}> entry")
                child = ET.SubElement(element, self._element_name(key))
                self._fill(child, child_value)
        elif value is not None:
            element.text = self._format_scalar(element.tag, value)

    @staticmethod
    def _single_entry(value: Any, where: str) -> tuple[str, Any]:
        if not isinstance(value, dict) or len(value) != 1:
            raise XmlRenderError(
                f"Expected a mapping with exactly one key as {where}, got {value!r}"
            )
        return next(iter(value.items()))

    @staticmethod
    def _element_name(key: Any) -> str:
        if not isinstance(key, str) or not _ELEMENT_NAME.match(key):
            raise XmlRenderError(f"Invalid XML element name: {key!r}")
        return key

    def _format_scalar(self, tag: str, value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, (float, Decimal)):
            quantum = self._quantity_quantum if tag in QUANTITY_ELEMENTS else self._quantum
            return self._format_decimal(value, quantum)
        if isinstance(value, str):
            return _INVALID_XML_CHARS.sub("", value)
        raise XmlRenderError(f"Unsupported value type {type(value).__name__}: {value!r}")

    @staticmethod
    def _format_decimal(value: float | Decimal, quantum: Decimal) -> str:
        number = value if isinstance(value, Decimal) else Decimal(repr(value))
        if not number.is_finite():
            raise XmlRenderError(f"Cannot render non-finite number {value!r}")
        rounded = number.quantize(quantum, rounding=ROUND_HALF_UP)
        if rounded.is_zero():
            rounded = abs(rounded)
        return f"{rounded:f}"
