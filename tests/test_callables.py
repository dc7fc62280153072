#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for function descriptors: invocation, argument allocation, metadata.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

import pytest

from rpcmap.core.args import make_arg, pointee_type, zero_value
from rpcmap.core.callables import FunctionCallable, make_callable
from rpcmap.core.signature import CallingConvention, NoArg
from rpcmap.core.utils.exceptions import SignatureError


@dataclass
class TestCtx:
    __test__ = False

    s: str = ""


@dataclass
class TestInput:
    __test__ = False

    A: str
    B: int


@dataclass
class Nested:
    inner: TestInput
    tags: List[str]
    note: Optional[str]
    labels: Dict[str, int] = field(default_factory=dict)


class Color(Enum):
    RED = "red"
    BLUE = "blue"


class Point(NamedTuple):
    x: int
    y: int = 5


def format_error(i: TestInput) -> Optional[Exception]:
    return ValueError("Hi,{0}/{1}".format(i.A, i.B))


def format_error_with_context(ctx: TestCtx, i: TestInput) -> Optional[Exception]:
    return ValueError("Hi,{0}/{1}/{2}".format(i.A, i.B, ctx.s))


def greet(i: int) -> Tuple[str, Optional[Exception]]:
    return "Hi,{0}".format(i), None


def greet_with_context(ctx: TestCtx, i: int) -> Tuple[str, Optional[Exception]]:
    return "Hi,{0}/{1}".format(ctx.s, i), None


def constant() -> Tuple[str, Optional[Exception]]:
    return "blah", None


def succeed() -> Optional[Exception]:
    return None


def by_reference(i: Optional[TestInput]) -> Tuple[Optional[TestInput], Optional[Exception]]:
    return i, None


def exploding(i: int) -> Optional[Exception]:
    raise RuntimeError("boom {0}".format(i))


def test_input_only_function_returns_target_error():
    fd = make_callable(format_error)
    _, err = fd.call(None, TestInput(A="xx", B=5))

    assert str(err) == "Hi,xx/5"


def test_context_function_receives_context_and_input():
    fd = make_callable(format_error_with_context)
    _, err = fd.call(TestCtx(s="T"), TestInput(A="xx", B=6))

    assert str(err) == "Hi,xx/6/T"


def test_result_and_error_are_returned_unchanged():
    result, err = make_callable(greet).call(None, 7)

    assert result == "Hi,7"
    assert err is None


def test_context_with_result():
    result, err = make_callable(greet_with_context).call(TestCtx(s="Ho"), 8)

    assert result == "Hi,Ho/8"
    assert err is None


def test_no_input_function_ignores_context_and_input():
    fd = make_callable(constant)

    assert fd.call(None, None) == ("blah", None)
    assert fd.call(TestCtx(s="ignored"), "ignored") == ("blah", None)


def test_error_only_function_success_gives_none_result():
    assert make_callable(succeed).call(None, None) == (None, None)


@pytest.mark.parametrize(
    "target,in_args,has_out_arg,convention",
    [
        (succeed, 0, False, CallingConvention.NO_ARG),
        (constant, 0, True, CallingConvention.NO_ARG),
        (format_error, 1, False, CallingConvention.INPUT_ONLY),
        (greet, 1, True, CallingConvention.INPUT_ONLY),
        (format_error_with_context, 2, False, CallingConvention.CONTEXT_AND_INPUT),
        (greet_with_context, 2, True, CallingConvention.CONTEXT_AND_INPUT),
    ],
)
def test_introspection(target, in_args, has_out_arg, convention):
    fd = make_callable(target)

    assert fd.in_args() == in_args
    assert fd.has_out_arg() is has_out_arg
    assert fd.convention is convention


def test_invalid_function_fails_at_construction():
    def too_many(a: int, b: int, c: int) -> Optional[Exception]:
        return None

    with pytest.raises(SignatureError):
        make_callable(too_many)


def test_target_exceptions_propagate():
    fd = make_callable(exploding)

    with pytest.raises(RuntimeError, match="boom 3"):
        fd.call(None, 3)


def test_non_exception_error_value_means_success():
    def sloppy() -> Tuple[int, Optional[Exception]]:
        return 1, "not an exception"

    assert make_callable(sloppy).call(None, None) == (1, None)


def test_make_arg_returns_fresh_zero_instances():
    fd = make_callable(format_error)
    first = fd.make_arg()
    second = fd.make_arg()

    assert first == TestInput(A="", B=0)
    first.A = "changed"
    assert second.A == ""
    assert first is not second


def test_make_arg_allocates_pointee_of_optional_input():
    arg = make_callable(by_reference).make_arg()

    assert isinstance(arg, TestInput)
    assert arg == TestInput(A="", B=0)


def test_make_arg_can_be_decoded_into():
    fd = make_callable(format_error)
    arg = fd.make_arg()
    for key, value in json.loads('{"A":"xx","B":9}').items():
        setattr(arg, key, value)

    _, err = fd.call(None, arg)
    assert str(err) == "Hi,xx/9"


def test_make_arg_for_no_input_is_noarg():
    arg = make_callable(constant).make_arg()

    assert isinstance(arg, NoArg)


def test_make_arg_for_scalar_input():
    assert make_callable(greet).make_arg() == 0


@pytest.mark.parametrize(
    "annotation,expected",
    [
        (int, 0),
        (str, ""),
        (bool, False),
        (float, 0.0),
        (bytes, b""),
        (List[int], []),
        (Dict[str, int], {}),
        (Optional[int], None),
        (Any, {}),
        (Color, Color.RED),
        (Point, Point(x=0, y=5)),
    ],
)
def test_zero_values(annotation, expected):
    assert zero_value(annotation) == expected


def test_zero_value_of_nested_dataclass():
    value = zero_value(Nested)

    assert value == Nested(inner=TestInput(A="", B=0), tags=[], note=None, labels={})


def test_zero_value_containers_are_not_shared():
    first = make_arg(Nested)
    second = make_arg(Nested)
    first.tags.append("x")

    assert second.tags == []


def test_pointee_type_only_unwraps_single_optional():
    assert pointee_type(Optional[TestInput]) is TestInput
    assert pointee_type(TestInput) is TestInput


def test_metadata_is_keyed_and_last_write_wins():
    fd = make_callable(greet)
    fd.set("level", "user")
    fd.set("level", "admin")

    assert fd.get("level") == "admin"
    assert fd.get("missing") is None
    assert fd.metadata == {"level": "admin"}
    assert fd.call(None, 1) == ("Hi,1", None)


def test_metadata_view_is_read_only():
    fd = make_callable(greet, metadata={"level": "user"})

    with pytest.raises(TypeError):
        fd.metadata["level"] = "admin"


def test_function_name_defaults_to_target_name():
    assert make_callable(greet).name == "greet"
    assert FunctionCallable(greet, name="hello").name == "hello"


class PlainInput:
    def __init__(self, name: str, count: int, scale: float = 1.0):
        self.name = name
        self.count = count
        self.scale = scale


class UntypedInput:
    def __init__(self, name, count):
        self.name = name
        self.count = count


class PositiveInput:
    def __init__(self, count: int):
        if count <= 0:
            raise ValueError("count must be positive")
        self.count = count


def takes_plain(i: PlainInput) -> Optional[Exception]:
    return None


def takes_untyped(i: UntypedInput) -> Optional[Exception]:
    return None


def takes_positive(i: PositiveInput) -> Optional[Exception]:
    return None


def test_make_arg_zero_fills_constructor_parameters():
    fd = make_callable(takes_plain)
    first = fd.make_arg()
    second = fd.make_arg()

    assert isinstance(first, PlainInput)
    assert (first.name, first.count, first.scale) == ("", 0, 1.0)
    assert first is not second


def test_make_arg_allocates_without_init_when_parameters_are_unannotated():
    arg = make_callable(takes_untyped).make_arg()

    assert isinstance(arg, UntypedInput)
    assert not hasattr(arg, "name")


def test_make_arg_allocates_without_init_when_constructor_rejects_zero_values():
    arg = make_callable(takes_positive).make_arg()

    assert isinstance(arg, PositiveInput)


def test_returned_errors_are_passed_through_as_the_same_object():
    failure = ValueError("exact")

    def error_only(i: int) -> Optional[Exception]:
        return failure

    def with_result(ctx: TestCtx, i: int) -> Tuple[str, Optional[Exception]]:
        return "partial", failure

    _, err = make_callable(error_only).call(None, 1)
    result, err2 = make_callable(with_result).call(TestCtx(), 1)

    assert err is failure
    assert result == "partial"
    assert err2 is failure
