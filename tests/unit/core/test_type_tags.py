"""Unit tests for the type-tag vocabulary and classifier."""

from __future__ import annotations

import copy
import pickle
import re
from decimal import Decimal
from enum import Enum, IntEnum, StrEnum
from fractions import Fraction

import pytest

from validate_options.errors import RequirementDefinitionError, ValidationFailure
from validate_options.type_tags import (
    ALL_TYPE_TAGS,
    NULLISH_TYPE_TAGS,
    UNDEFINED,
    TypeTag,
    classify,
    is_nullish,
    parse_type_tag,
    parse_type_tags,
    union_type_tags,
)


class _Color(Enum):
    RED = 1


class _Mode(StrEnum):
    FAST = "fast"


class _Level(IntEnum):
    LOW = 1


class _Point:
    def __init__(self) -> None:
        self.x = 1


class _Callable:
    def __call__(self) -> None:
        return None


def _named() -> None:
    return None


@pytest.mark.unit
@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ([], TypeTag.ARRAY),
        ([1, 2], TypeTag.ARRAY),
        ((), TypeTag.ARRAY),
        (True, TypeTag.BOOLEAN),
        (False, TypeTag.BOOLEAN),
        (_named, TypeTag.FUNCTION),
        (lambda: None, TypeTag.FUNCTION),
        (len, TypeTag.FUNCTION),
        (_Point, TypeTag.FUNCTION),
        (_Callable(), TypeTag.FUNCTION),
        (None, TypeTag.NULL),
        (0, TypeTag.NUMBER),
        (1337, TypeTag.NUMBER),
        (1.5, TypeTag.NUMBER),
        (Decimal("2.5"), TypeTag.NUMBER),
        (Fraction(1, 3), TypeTag.NUMBER),
        (_Level.LOW, TypeTag.NUMBER),
        ({}, TypeTag.OBJECT),
        ({"a": 1}, TypeTag.OBJECT),
        (set(), TypeTag.OBJECT),
        (_Point(), TypeTag.OBJECT),
        (re.compile("x"), TypeTag.REGEXP),
        ("", TypeTag.STRING),
        ("foo", TypeTag.STRING),
        (_Mode.FAST, TypeTag.STRING),
        (_Color.RED, TypeTag.SYMBOL),
        (UNDEFINED, TypeTag.UNDEFINED),
    ],
)
def test_classify_maps_each_value_to_its_tag(value: object, expected: TypeTag) -> None:
    assert classify(value) is expected


@pytest.mark.unit
def test_array_null_regexp_and_object_never_collide() -> None:
    tags = {classify([]), classify(None), classify(re.compile("x")), classify({})}

    assert tags == {TypeTag.ARRAY, TypeTag.NULL, TypeTag.REGEXP, TypeTag.OBJECT}


@pytest.mark.unit
def test_empty_containers_are_not_null() -> None:
    assert classify([]) is not TypeTag.NULL
    assert classify({}) is not TypeTag.NULL
    assert classify("") is not TypeTag.NULL


@pytest.mark.unit
def test_vocabulary_is_closed_and_ordered() -> None:
    assert [tag.value for tag in ALL_TYPE_TAGS] == [
        "array",
        "boolean",
        "function",
        "null",
        "number",
        "object",
        "regexp",
        "string",
        "symbol",
        "undefined",
    ]
    assert NULLISH_TYPE_TAGS == (TypeTag.UNDEFINED, TypeTag.NULL)


@pytest.mark.unit
def test_undefined_is_a_falsy_singleton_that_survives_copies() -> None:
    assert not UNDEFINED
    assert repr(UNDEFINED) == "UNDEFINED"
    assert copy.copy(UNDEFINED) is UNDEFINED
    assert copy.deepcopy(UNDEFINED) is UNDEFINED
    assert pickle.loads(pickle.dumps(UNDEFINED)) is UNDEFINED
    assert type(UNDEFINED)() is UNDEFINED
    assert is_nullish(UNDEFINED)
    assert is_nullish(None)
    assert not is_nullish(0)


@pytest.mark.unit
def test_parse_type_tag_accepts_names_and_members() -> None:
    assert parse_type_tag("string") is TypeTag.STRING
    assert parse_type_tag(TypeTag.NULL) is TypeTag.NULL


@pytest.mark.unit
def test_unknown_type_name_is_a_definition_error_not_a_validation_failure() -> None:
    with pytest.raises(RequirementDefinitionError) as info:
        parse_type_tag("integer")

    assert 'invalid requirement type "integer"' in str(info.value)
    assert not isinstance(info.value, ValidationFailure)


@pytest.mark.unit
def test_parse_type_tag_rejects_non_strings() -> None:
    with pytest.raises(RequirementDefinitionError, match="must be a tag name, got int"):
        parse_type_tag(3)


@pytest.mark.unit
def test_parse_type_tags_dedupes_in_order_and_accepts_single_name() -> None:
    assert parse_type_tags(["string", "null", "string"]) == (TypeTag.STRING, TypeTag.NULL)
    assert parse_type_tags("number") == (TypeTag.NUMBER,)

    with pytest.raises(RequirementDefinitionError, match="must be a list of tag names"):
        parse_type_tags(42)  # type: ignore[arg-type]


@pytest.mark.unit
def test_union_type_tags_keeps_first_occurrence_order() -> None:
    merged = union_type_tags(
        (TypeTag.STRING, TypeTag.UNDEFINED, TypeTag.NULL),
        (TypeTag.NUMBER, TypeTag.UNDEFINED, TypeTag.NULL),
    )

    assert merged == (TypeTag.STRING, TypeTag.UNDEFINED, TypeTag.NULL, TypeTag.NUMBER)
