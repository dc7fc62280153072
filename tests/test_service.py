#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for service reflection over receiver objects.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import pytest

from rpcmap.core.config import default_name_mapper
from rpcmap.core.metadata import method_metadata
from rpcmap.core.service import NAME_MAPPER_OPT_OUT, make_service, service_name_for
from rpcmap.core.signature import CallingConvention, NoArg
from rpcmap.core.utils.exceptions import ServiceNameError


@dataclass
class Ctx:
    s: str = ""


@dataclass
class Input:
    A: str = ""
    B: int = 0


@dataclass
class Result:
    o: str = ""


class S:
    def __init__(self):
        self.calls = 0

    def Meth1(self, i: Optional[Input]) -> Optional[Exception]:
        self.calls += 1
        return ValueError("Hi,{0}/{1}".format(i.A, i.B))

    def Meth2(self, ctx: Ctx, i: Input) -> Optional[Exception]:
        self.calls += 1
        return ValueError("Hi,{0}/{1}/{2}".format(i.A, i.B, ctx.s))

    def Meth3(self, ctx: Ctx, i: Input) -> Tuple[Result, Optional[Exception]]:
        self.calls += 1
        return Result(o="Hi,{0}/{1}/{2}".format(i.A, i.B, ctx.s)), None

    def Meth4(self) -> Tuple[Result, Optional[Exception]]:
        self.calls += 1
        return Result(o="hi"), None

    def Meth5(self, a: int, b: int, c: int) -> Optional[Exception]:
        return None

    def NotFallible(self, i: int) -> int:
        return i

    def Ping(self, ctx: Ctx, _: NoArg) -> Optional[Exception]:
        return None

    def _hidden(self) -> Optional[Exception]:
        return None

    @staticmethod
    def Static(i: int) -> Optional[Exception]:
        return None

    @classmethod
    def Factory(cls, i: int) -> Optional[Exception]:
        return None

    @property
    def Prop(self) -> int:
        return 1

    Attribute = "not a method"


class Base:
    def Inherited(self) -> Optional[Exception]:
        return None


class Derived(Base):
    def Own(self) -> Optional[Exception]:
        return None


class Colliding:
    def Alpha(self) -> Tuple[str, Optional[Exception]]:
        return "Alpha", None

    def alpha(self) -> Tuple[str, Optional[Exception]]:
        return "alpha", None


class _Private:
    def Run(self) -> Optional[Exception]:
        return None


class Guarded:
    def Read(self) -> Tuple[str, Optional[Exception]]:
        return "data", None

    @method_metadata(level="admin")
    def Wipe(self) -> Optional[Exception]:
        return None

    @method_metadata(level="admin", audit=True)
    def Reset(self) -> Optional[Exception]:
        return None


def test_service_name_derived_from_type():
    sd = make_service(default_name_mapper, "", S())

    assert sd.name == "S"
    assert service_name_for(S()) == "S"


def test_explicit_name_is_used_as_is():
    sd = make_service(default_name_mapper, "_internal", S())

    assert sd.name == "_internal"


def test_private_type_without_explicit_name_fails():
    with pytest.raises(ServiceNameError):
        make_service(default_name_mapper, "", _Private())


def test_private_type_with_explicit_name_is_accepted():
    sd = make_service(default_name_mapper, "Runner", _Private())

    assert sd.method_names() == ["run"]


def test_only_valid_public_instance_methods_are_exposed():
    sd = make_service(default_name_mapper, "", S())

    assert sd.method_names() == ["meth1", "meth2", "meth3", "meth4", "ping"]
    assert len(sd) == 5
    assert "meth5" not in sd
    assert all(method.name != "Meth5" for method in sd.list_methods())


def test_skipped_methods_are_reported():
    sd = make_service(default_name_mapper, "", S())
    skipped = {item.name: item.reason for item in sd.skipped}

    assert set(skipped) == {"Meth5", "NotFallible"}
    assert "expected 0, 1 or 2" in skipped["Meth5"]


def test_method_call_scenarios():
    receiver = S()
    sd = make_service(default_name_mapper, "", receiver)

    _, err1 = sd.get_method("meth1").call(None, Input(A="zz", B=3))
    _, err2 = sd.get_method("meth2").call(Ctx(s="ku"), Input(A="yy", B=2))
    res3, err3 = sd.get_method("meth3").call(Ctx(s="cc"), Input(A="tt", B=77))
    res4, err4 = sd.get_method("meth4").call(None, None)

    assert str(err1) == "Hi,zz/3"
    assert str(err2) == "Hi,yy/2/ku"
    assert res3.o == "Hi,tt/77/cc" and err3 is None
    assert res4.o == "hi" and err4 is None
    assert receiver.calls == 4



class Failing:
    def __init__(self, failure):
        self.failure = failure

    def Check(self, i: int) -> Optional[Exception]:
        return self.failure

    def Fetch(self, ctx: Ctx, i: int) -> Tuple[Result, Optional[Exception]]:
        return Result(o="partial"), self.failure


def test_method_errors_are_passed_through_as_the_same_object():
    failure = KeyError("exact")
    sd = make_service(default_name_mapper, "", Failing(failure))

    _, err = sd.get_method("check").call(None, 1)
    result, err2 = sd.get_method("fetch").call(Ctx(), 1)

    assert err is failure
    assert result.o == "partial"
    assert err2 is failure

def test_method_descriptor_introspection():
    sd = make_service(default_name_mapper, "", S())
    meth2 = sd.get_method("meth2")
    meth4 = sd.get_method("meth4")

    assert meth2.name == "Meth2"
    assert meth2.mapped_name == "meth2"
    assert meth2.argno == 3
    assert meth2.in_args() == 2
    assert meth2.has_out_arg() is False
    assert meth4.argno == 1
    assert meth4.in_args() == 0
    assert meth4.convention is CallingConvention.NO_ARG
    assert sd.get_method("meth1").in_args() == 1


def test_methods_share_receiver():
    receiver = S()
    sd = make_service(default_name_mapper, "", receiver)

    assert sd.receiver is receiver
    assert all(method.receiver is receiver for method in sd.list_methods())


def test_make_arg_for_methods():
    sd = make_service(default_name_mapper, "", S())

    arg1 = sd.get_method("meth1").make_arg()
    arg2 = sd.get_method("meth2").make_arg()
    arg2.A = "xx"

    assert arg1 == Input()
    assert sd.get_method("meth2").make_arg() == Input()
    assert isinstance(sd.get_method("meth4").make_arg(), NoArg)
    assert isinstance(sd.get_method("ping").make_arg(), NoArg)


def test_name_mapper_opt_out():
    def mapper(name):
        return "" if name == "Meth2" else name.lower()

    sd = make_service(mapper, "", S())

    assert sd.get_method("meth2") is None
    assert "meth2" not in sd.method_names()
    assert all(method.name != "Meth2" for method in sd.list_methods())
    assert any(
        item.name == "Meth2" and item.reason == NAME_MAPPER_OPT_OUT for item in sd.skipped
    )


def test_custom_name_mapper_keeps_declared_names():
    sd = make_service(lambda name: name, "", S())

    assert sd.get_method("Meth3") is not None
    assert sd.get_method("meth3") is None


def test_inherited_methods_are_exposed():
    sd = make_service(default_name_mapper, "", Derived())

    assert sd.method_names() == ["inherited", "own"]


def test_collision_keeps_lexicographically_greater_name(caplog):
    with caplog.at_level(logging.WARNING, logger="rpcmap"):
        sd = make_service(default_name_mapper, "", Colliding())

    assert sd.method_names() == ["alpha"]
    assert sd.get_method("alpha").call(None, None) == ("alpha", None)
    assert "replaces" in caplog.text


def test_filter_removes_rejected_methods():
    sd = make_service(default_name_mapper, "", Guarded())
    sd.filter(lambda method: method.get("level") != "admin")

    assert sd.method_names() == ["read"]
    assert len(sd) == 1
    assert sd.get_method("wipe") is None
    assert sd.get_method("reset") is None


def test_declared_metadata_is_copied_per_method():
    sd = make_service(default_name_mapper, "", Guarded())

    assert sd.get_method("reset").get("audit") is True
    assert sd.get_method("wipe").get("audit") is None
    assert sd.get_method("read").metadata == {}


def test_metadata_set_on_one_method_does_not_leak():
    sd = make_service(default_name_mapper, "", Guarded())
    sd.get_method("wipe").set("level", "root")

    assert sd.get_method("reset").get("level") == "admin"
    assert Guarded.Wipe.__rpcmap_metadata__ == {"level": "admin"}
