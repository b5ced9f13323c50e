"""Unit tests for requirement combinators and primitive requirements."""

from __future__ import annotations

import pytest

from validate_options.combinators import (
    ARRAY,
    BOOLEAN,
    NUMBER,
    OBJECT,
    PRIMITIVES,
    STRING,
    either,
    optional,
    required,
)
from validate_options.engine import validate_options
from validate_options.errors import RequirementDefinitionError, ValidationFailure
from validate_options.requirements import Requirement
from validate_options.type_tags import ALL_TYPE_TAGS, NULLISH_TYPE_TAGS, TypeTag

try:
    from hypothesis import given, settings
    from hypothesis import strategies as st
except ModuleNotFoundError:
    _HYPOTHESIS_AVAILABLE = False
else:
    _HYPOTHESIS_AVAILABLE = True


@pytest.mark.unit
@pytest.mark.parametrize(
    ("requirement", "tag"),
    [
        (STRING, TypeTag.STRING),
        (NUMBER, TypeTag.NUMBER),
        (BOOLEAN, TypeTag.BOOLEAN),
        (OBJECT, TypeTag.OBJECT),
        (ARRAY, TypeTag.ARRAY),
    ],
)
def test_primitives_are_optional_by_default(requirement: Requirement, tag: TypeTag) -> None:
    assert requirement.types == (tag, TypeTag.UNDEFINED, TypeTag.NULL)
    assert requirement.is_optional


@pytest.mark.unit
def test_primitives_registry_names_each_primitive() -> None:
    assert PRIMITIVES == {
        "string": STRING,
        "number": NUMBER,
        "boolean": BOOLEAN,
        "object": OBJECT,
        "array": ARRAY,
    }


@pytest.mark.unit
def test_required_strips_nullish_tags() -> None:
    assert required(STRING).types == (TypeTag.STRING,)
    assert not required(STRING).is_optional


@pytest.mark.unit
def test_required_without_types_starts_from_full_vocabulary() -> None:
    result = required(Requirement(message="needed"))

    assert result.types == tuple(tag for tag in ALL_TYPE_TAGS if tag not in NULLISH_TYPE_TAGS)
    assert result.message == "needed"


@pytest.mark.unit
def test_optional_restores_nullish_tags_once() -> None:
    assert optional(required(STRING)).types == STRING.types
    assert optional(optional(NUMBER)).types == optional(NUMBER).types


@pytest.mark.unit
def test_optional_without_types_accepts_only_absent_values() -> None:
    result = optional({"predicate": lambda value: value > 2})

    assert result.types == NULLISH_TYPE_TAGS
    assert result.is_optional
    assert validate_options({}, {"a": result}) == {}
    assert validate_options({"a": None}, {"a": result}) == {"a": None}

    with pytest.raises(ValidationFailure, match="following types: undefined, null"):
        validate_options({"a": 3}, {"a": result})


@pytest.mark.unit
def test_combinators_keep_other_fields() -> None:
    def check(value: object) -> bool:
        return bool(value)

    base = Requirement(types=["string"], predicate=check, message="m", default="d")

    for derived in (required(base), optional(base)):
        assert derived.predicate is check
        assert derived.message == "m"
        assert derived.default == "d"


@pytest.mark.unit
def test_combinators_accept_raw_tag_lists_and_inline_mappings() -> None:
    assert required(["string", "null"]).types == (TypeTag.STRING,)
    assert optional({"types": ["array"]}).types == ARRAY.types


@pytest.mark.unit
def test_combinators_never_mutate_their_input() -> None:
    base = Requirement(types=["string", "undefined", "null"])
    snapshot = base.types

    required(base)
    optional(base)
    either(base, NUMBER)

    assert base.types == snapshot


@pytest.mark.unit
def test_either_unions_in_first_occurrence_order() -> None:
    text = either(STRING, NUMBER)

    assert text.types == (TypeTag.STRING, TypeTag.UNDEFINED, TypeTag.NULL, TypeTag.NUMBER)


@pytest.mark.unit
def test_either_resolves_nested_requirements() -> None:
    text = {"types": either(STRING, NUMBER)}

    bool_or_text = either(text, BOOLEAN)

    assert bool_or_text.types == (
        TypeTag.STRING,
        TypeTag.UNDEFINED,
        TypeTag.NULL,
        TypeTag.NUMBER,
        TypeTag.BOOLEAN,
    )


@pytest.mark.unit
def test_either_accepts_raw_tag_lists() -> None:
    assert either(["regexp"], ["string", "regexp"]).types == (TypeTag.REGEXP, TypeTag.STRING)


@pytest.mark.unit
def test_either_argument_without_types_contributes_everything() -> None:
    assert set(either(Requirement(), STRING).types or ()) == set(ALL_TYPE_TAGS)


@pytest.mark.unit
def test_either_requires_an_argument() -> None:
    with pytest.raises(RequirementDefinitionError, match="at least one requirement"):
        either()


@pytest.mark.unit
def test_either_rejects_unknown_tags() -> None:
    with pytest.raises(RequirementDefinitionError, match='invalid requirement type "text"'):
        either(STRING, ["text"])


if _HYPOTHESIS_AVAILABLE:
    _TAG_LISTS = st.lists(st.sampled_from(ALL_TYPE_TAGS), max_size=10)

    @pytest.mark.unit
    @settings(max_examples=100, deadline=None)
    @given(tags=_TAG_LISTS)
    def test_property_optional_is_idempotent(tags: list[TypeTag]) -> None:
        base = Requirement(types=tags)

        once = optional(base)

        assert optional(once).types == once.types
        assert once.types is not None
        assert once.types.count(TypeTag.UNDEFINED) == 1
        assert once.types.count(TypeTag.NULL) == 1

    @pytest.mark.unit
    @settings(max_examples=100, deadline=None)
    @given(tags=_TAG_LISTS)
    def test_property_required_strips_what_optional_added(tags: list[TypeTag]) -> None:
        result = required(optional(Requirement(types=tags)))

        assert result.types is not None
        assert not set(result.types) & set(NULLISH_TYPE_TAGS)

    @pytest.mark.unit
    @settings(max_examples=100, deadline=None)
    @given(first=_TAG_LISTS, second=_TAG_LISTS)
    def test_property_either_is_order_preserving_union(
        first: list[TypeTag],
        second: list[TypeTag],
    ) -> None:
        expected: list[TypeTag] = []
        for tag in [*first, *second]:
            if tag not in expected:
                expected.append(tag)

        result = either(Requirement(types=first), Requirement(types=second))

        assert result.types == tuple(expected)

else:

    def test_property_optional_is_idempotent() -> None:
        pytest.skip("hypothesis is not installed")

    def test_property_required_strips_what_optional_added() -> None:
        pytest.skip("hypothesis is not installed")

    def test_property_either_is_order_preserving_union() -> None:
        pytest.skip("hypothesis is not installed")
