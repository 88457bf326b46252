# *******************************************************************************
# Copyright (c) 2025 Contributors to the Eclipse Foundation
#
# See the NOTICE file(s) distributed with this work for additional
# information regarding copyright ownership.
#
# This program and the accompanying materials are made available under the
# terms of the Apache License Version 2.0 which is available at
# https://www.apache.org/licenses/LICENSE-2.0
#
# SPDX-License-Identifier: Apache-2.0
# *******************************************************************************

import itertools

import pytest

from src.local_package_manager.version import (
    Comparison,
    MalformedVersionError,
    UpdateDecision,
    UpdateReason,
    Version,
    compare,
    is_local_reference,
    is_stable,
    needs_update,
    parse_components,
    select_latest_stable,
    strip_range_operator,
)


def test_version_smaller():
    assert Version("1.0.0") < Version("1.0.1")
    assert Version("1.0.0") < Version("1.1.0")
    assert Version("1.0.0") < Version("2.0.0")
    assert Version("1.0.9") < Version("1.0.10")
    assert not Version("2.1") < Version("2.1.0")


def test_version_equality_is_by_raw_string():
    assert Version("1.0.0") == Version("1.0.0")
    assert Version("1.0") != Version("1.0.0")


def test_version_ordering_against_other_types():
    assert Version("1.0.0").__lt__("2.0.0") is NotImplemented
    with pytest.raises(TypeError):
        _ = Version("1.0.0") < "2.0.0"  # type: ignore[operator]


def test_version_semver():
    assert Version("1.2.3").semver is not None
    assert Version("^1.2").semver is not None
    assert Version("file:../lib").semver is None
    assert Version("1.2.3.4").semver is None


class TestCompare:
    def test_longer_version_wins_when_prefix_equal(self):
        assert compare("1.2.3", "1.2") is Comparison.GREATER
        assert compare("1.2", "1.2.3") is Comparison.LESSER

    def test_missing_components_are_zero(self):
        assert compare("1.2.0", "1.2") is Comparison.EQUAL
        assert compare("2.1", "2.1.0.0") is Comparison.EQUAL

    def test_numeric_not_lexical(self):
        assert compare("1.10.0", "1.9.0") is Comparison.GREATER

    def test_range_operators_are_ignored(self):
        assert compare("^1.2.3", "1.2.3") is Comparison.EQUAL
        assert compare("~1.3.0", "^1.2.9") is Comparison.GREATER

    def test_malformed_components_count_as_zero(self):
        assert compare("1.x.0", "1.0.0") is Comparison.EQUAL
        assert compare("latest", "0") is Comparison.EQUAL
        assert compare("", "0.0.1") is Comparison.LESSER

    def test_total_order(self):
        versions = ["0.9", "1", "1.0.1", "1.2", "1.2.0", "^1.3.0", "2.0.0-beta", "x"]
        for a, b in itertools.product(versions, repeat=2):
            # antisymmetric
            assert compare(a, b).value == -compare(b, a).value
        for a, b, c in itertools.product(versions, repeat=3):
            # transitive
            if compare(a, b) is not Comparison.LESSER and compare(
                b, c
            ) is not Comparison.LESSER:
                assert compare(a, c) is not Comparison.LESSER


def test_parse_components():
    assert parse_components("^1.2.3") == [1, 2, 3]
    assert parse_components("1.2.3-beta") == [1, 2, 3]
    assert parse_components("1.a") == [1, 0]


def test_parse_components_strict():
    with pytest.raises(MalformedVersionError):
        parse_components("1.a", strict=True)
    assert parse_components("1.2", strict=True) == [1, 2]


def test_is_stable():
    assert is_stable("2.0.1")
    assert is_stable("^2.0.1")
    assert not is_stable("2.0.1-rc1")
    assert not is_stable("2.0.1-0")
    assert not is_stable("1.2.3-beta")
    assert not is_stable("1.2.3-rc.3")


def test_strip_range_operator():
    assert strip_range_operator("^1.0.0") == "1.0.0"
    assert strip_range_operator("~1.0.0") == "1.0.0"
    assert strip_range_operator("1.0.0") == "1.0.0"


def test_is_local_reference():
    assert is_local_reference("file:../lib")
    assert not is_local_reference("1.0.0")
    assert not is_local_reference(None)


class TestSelectLatestStable:
    def test_prereleases_are_ignored(self):
        assert select_latest_stable(["1.0.0", "2.0.0-beta", "1.9.9"]) == "1.9.9"

    def test_no_stable_version(self):
        assert select_latest_stable(["1.0.0-alpha"]) is None
        assert select_latest_stable([]) is None

    def test_highest_not_last(self):
        assert select_latest_stable(["1.10.0", "1.2.0", "1.9.0"]) == "1.10.0"


class TestNeedsUpdate:
    def test_local_reference_always_updates(self):
        decision = needs_update("file:../lib", ["1.0.0"], None)
        assert decision.should_update
        assert decision.reason == "local"
        assert decision.latest_available == "1.0.0"

    def test_local_reference_without_registry(self):
        decision = needs_update("file:../lib/acme-ui-1.2.0.tgz", None)
        assert decision == UpdateDecision(True, UpdateReason.LOCAL, None)

    def test_local_reference_with_requested_version(self):
        decision = needs_update("file:../x.tgz", ["1.0.0", "1.10.0"], "1.0.0")
        assert decision == UpdateDecision(True, UpdateReason.LOCAL, "1.0.0")

    def test_explicit_version_bypasses_comparison(self):
        decision = needs_update("2.0.0", ["1.0.0", "2.0.0"], "1.0.0-rc.1")
        assert decision == UpdateDecision(True, UpdateReason.EXPLICIT, "1.0.0-rc.1")

    def test_newer_version(self):
        decision = needs_update("1.0.0", ["1.0.0", "1.1.0"], None)
        assert decision == UpdateDecision(True, UpdateReason.NEWER, "1.1.0")
        assert decision.reason == "newer"

    def test_range_operator_of_installed_version(self):
        assert needs_update("^1.0.0", ["1.0.0", "1.1.0"]).should_update
        assert not needs_update("^1.1.0", ["1.0.0", "1.1.0"]).should_update

    def test_up_to_date(self):
        decision = needs_update("1.1.0", ["1.0.0", "1.1.0"], None)
        assert not decision.should_update
        assert decision.reason is UpdateReason.UP_TO_DATE

    def test_newer_prerelease_is_ignored(self):
        assert not needs_update("1.1.0", ["1.1.0", "1.2.0-beta"]).should_update

    def test_missing_inputs_mean_no_update(self):
        assert not needs_update("1.0.0", []).should_update
        assert not needs_update("1.0.0", None).should_update
        assert not needs_update(None, ["1.0.0"]).should_update


def test_install_spec():
    assert UpdateDecision(True, UpdateReason.NEWER, "1.1.0").install_spec(
        "@acme/ui"
    ) == "@acme/ui@1.1.0"
    assert UpdateDecision(True, UpdateReason.LOCAL).install_spec("@acme/ui") == (
        "@acme/ui"
    )
