"""Tests for the payment rail routing engine."""

from itertools import product

import pytest

from payroute.models import PaymentRequest
from payroute.routing_engine import RoutingEngine, evaluate
from payroute.vocabulary import (
    DBS_HK_SWIFT,
    GATE_NAME,
    RAIL_ORDER,
    SKIP_REASON,
)


@pytest.fixture
def engine():
    return RoutingEngine()


def make_request(
    method="LOCAL",
    country="HKG",
    currency="HKD",
    bank_identifier="",
    amount=1000,
    pay_on_behalf_of=False,
):
    return PaymentRequest(
        method=method,
        country=country,
        currency=currency,
        bank_identifier=bank_identifier,
        amount=amount,
        pay_on_behalf_of=pay_on_behalf_of,
    )


def met(conditions):
    return [c.met for c in conditions]


# =========================================================================
# Reference scenarios
# =========================================================================

class TestReferenceScenarios:
    def test_local_hkd_routes_fps(self, engine):
        result = engine.evaluate(make_request())
        assert result.route == "FPS"
        assert [s.name for s in result.steps] == [GATE_NAME, "FPS"]

    def test_dbs_bank_routes_act(self, engine):
        result = engine.evaluate(make_request(bank_identifier=DBS_HK_SWIFT))
        assert result.route == "ACT"
        assert [s.name for s in result.steps] == [GATE_NAME, "FPS", "ACT"]
        assert met(result.step("FPS").conditions) == [True, True, False, True, True]

    def test_swift_usd_routes_rtgs_scenario_a(self, engine):
        result = engine.evaluate(make_request(
            method="SWIFT", currency="USD", bank_identifier="OTHERBANKXXX",
        ))
        assert result.route == "RTGS"
        assert met(result.step("RTGS").scenarios) == [True, False, False]
        assert result.step("TT") is None

    def test_local_gbp_routes_tt_fact_four(self, engine):
        result = engine.evaluate(make_request(currency="GBP", bank_identifier="OTHERBANKXXX"))
        assert result.route == "TT"
        assert met(result.step("TT").scenarios) == [False, False, False, True, False]

    def test_non_hk_country_routes_tt(self, engine):
        result = engine.evaluate(make_request(country="USA", currency="USD"))
        assert result.route == "TT"
        assert result.steps[0].passed is True
        assert met(result.step("RTGS").scenarios) == [False, False, False]
        assert met(result.step("TT").scenarios) == [False, False, True, False, False]

    def test_unspecified_other_routes_tt(self, engine):
        result = engine.evaluate(make_request(
            method="UNSPECIFIED", country="OTHER", currency="OTHER", amount=0,
        ))
        assert result.route == "TT"
        assert met(result.step("TT").scenarios) == [False, True, True, False, False]
        assert [s.name for s in result.steps] == [GATE_NAME, *RAIL_ORDER]


# =========================================================================
# Eligibility gate
# =========================================================================

class TestEligibilityGate:
    @pytest.mark.parametrize("method", ["LOCAL", "SWIFT", "UNSPECIFIED"])
    def test_recognized_methods_pass(self, engine, method):
        gate = engine.evaluate(make_request(method=method)).steps[0]
        assert gate.name == GATE_NAME
        assert gate.passed is True
        assert met(gate.scenarios) == [True, False]

    def test_method_is_case_sensitive(self, engine):
        result = engine.evaluate(make_request(method="local"))
        assert result.steps[0].passed is False

    def test_unrecognized_method_skips_gated_rails(self, engine):
        result = engine.evaluate(make_request(method="CHATS", country="USA"))
        assert [s.name for s in result.steps] == [GATE_NAME, *RAIL_ORDER]
        for step in result.steps[1:4]:
            assert step.skipped is True
            assert step.passed is False
            assert step.reason == SKIP_REASON
            assert step.conditions is None and step.scenarios is None
        assert result.step("TT").skipped is None
        assert result.route == "TT"

    def test_pobo_context_opens_gate_for_unrecognized_method(self, engine):
        result = engine.evaluate(make_request(
            method="CHATS", currency="HKD", bank_identifier="OTHERBANKXXX",
            pay_on_behalf_of=True,
        ))
        gate = result.steps[0]
        assert gate.passed is True
        assert met(gate.scenarios) == [False, True]
        assert result.route == "RTGS"
        assert met(result.step("RTGS").scenarios) == [False, False, True]

    def test_pobo_usd_unrecognized_method_meets_scenarios_b_and_c(self, engine):
        result = engine.evaluate(make_request(
            method="CHATS", currency="USD", bank_identifier="OTHERBANKXXX",
            pay_on_behalf_of=True,
        ))
        assert result.route == "RTGS"
        assert met(result.step("RTGS").scenarios) == [False, True, True]

    @pytest.mark.parametrize("overrides", [
        {"bank_identifier": "   "},
        {"country": "USA"},
        {"currency": "GBP"},
        {"pay_on_behalf_of": False},
    ])
    def test_pobo_context_requires_every_fact(self, engine, overrides):
        fields = dict(
            method="CHATS", currency="USD", bank_identifier="OTHERBANKXXX",
            pay_on_behalf_of=True,
        )
        fields.update(overrides)
        gate = engine.evaluate(make_request(**fields)).steps[0]
        assert gate.passed is False


# =========================================================================
# FPS / ACT / RTGS
# =========================================================================

class TestRails:
    def test_fps_computes_every_condition(self, engine):
        result = engine.evaluate(make_request(
            method="SWIFT", country="USA", currency="GBP",
            bank_identifier=DBS_HK_SWIFT, pay_on_behalf_of=True,
        ))
        fps = result.step("FPS")
        assert len(fps.conditions) == 5
        assert met(fps.conditions) == [False, False, False, False, False]
        assert met(result.step("ACT").conditions) == [False, True, False]
        assert result.route == "TT"

    def test_cnh_at_threshold_routes_fps(self, engine):
        result = engine.evaluate(make_request(currency="CNH", amount=5_000_000))
        assert result.route == "FPS"

    def test_cnh_above_threshold_routes_rtgs_scenario_b(self, engine):
        result = engine.evaluate(make_request(currency="CNH", amount=5_000_001))
        assert result.route == "RTGS"
        assert result.step("FPS").conditions[3].met is False
        assert met(result.step("RTGS").scenarios) == [False, True, False]

    def test_negative_amount_is_not_rejected(self, engine):
        assert engine.evaluate(make_request(currency="CNH", amount=-100)).route == "FPS"

    def test_dbs_code_is_normalized(self, engine):
        result = engine.evaluate(make_request(bank_identifier=" dhbkhkhhxxx "))
        assert result.route == "ACT"

    def test_swift_to_dbs_routes_act(self, engine):
        result = engine.evaluate(make_request(
            method="SWIFT", currency="USD", bank_identifier=DBS_HK_SWIFT,
        ))
        assert result.route == "ACT"

    def test_local_eur_routes_rtgs_scenario_b(self, engine):
        result = engine.evaluate(make_request(currency="EUR", bank_identifier="OTHERBANKXXX"))
        assert result.route == "RTGS"
        assert met(result.step("RTGS").scenarios) == [False, True, False]

    def test_pobo_with_bank_routes_rtgs_scenario_c(self, engine):
        result = engine.evaluate(make_request(
            bank_identifier="OTHERBANKXXX", pay_on_behalf_of=True,
        ))
        assert result.step("FPS").conditions[4].met is False
        assert result.route == "RTGS"
        assert met(result.step("RTGS").scenarios) == [False, False, True]

    def test_pobo_without_bank_falls_to_tt(self, engine):
        result = engine.evaluate(make_request(pay_on_behalf_of=True))
        assert result.route == "TT"
        assert met(result.step("TT").scenarios) == [False, False, False, False, True]

    def test_currency_is_case_sensitive(self, engine):
        result = engine.evaluate(make_request(currency="hkd"))
        assert result.route == "TT"
        assert result.step("TT").scenarios[3].met is True

    def test_country_is_case_sensitive(self, engine):
        result = engine.evaluate(make_request(country="hkg"))
        assert result.route == "TT"
        assert result.step("TT").scenarios[2].met is True


# =========================================================================
# UNKNOWN outcome
# =========================================================================

class TestUnknownRoute:
    def test_unrecognized_method_to_dbs_is_unknown(self, engine):
        result = engine.evaluate(make_request(
            method="CHATS", currency="GBP", bank_identifier=DBS_HK_SWIFT,
        ))
        assert result.route == "UNKNOWN"
        assert not result.is_resolved
        assert result.selected_step is None
        assert len(result.steps) == 5
        assert all(not s.passed for s in result.steps)

    def test_unrecognized_method_hkd_is_unknown(self, engine):
        result = engine.evaluate(make_request(method="", bank_identifier="OTHERBANKXXX"))
        assert result.route == "UNKNOWN"
        assert met(result.step("TT").scenarios) == [False] * 5


# =========================================================================
# Properties
# =========================================================================

METHODS = ["LOCAL", "SWIFT", "UNSPECIFIED", "CHATS"]
COUNTRIES = ["HKG", "USA"]
CURRENCIES = ["HKD", "CNH", "USD", "GBP"]
BANKS = ["", DBS_HK_SWIFT, "OTHERBANKXXX"]
AMOUNTS = [1000, 5_000_001]
POBO = [False, True]


def all_requests():
    for fields in product(METHODS, COUNTRIES, CURRENCIES, BANKS, AMOUNTS, POBO):
        yield make_request(*fields)


class TestProperties:
    def test_deterministic(self, engine):
        for request in all_requests():
            assert engine.evaluate(request) == engine.evaluate(request)

    def test_single_verdict(self, engine):
        for request in all_requests():
            result = engine.evaluate(request)
            rails_passed = [s for s in result.steps[1:] if s.passed]
            assert len(rails_passed) <= 1
            if rails_passed:
                assert result.route == rails_passed[0].name
                assert result.selected_step is rails_passed[0]
            else:
                assert result.route == "UNKNOWN"

    def test_step_order_and_truncation(self, engine):
        for request in all_requests():
            result = engine.evaluate(request)
            names = [s.name for s in result.steps]
            assert names[0] == GATE_NAME
            assert names[1:] == list(RAIL_ORDER[:len(names) - 1])
            if result.route != "UNKNOWN":
                assert names[-1] == result.route

    def test_skip_consistency(self, engine):
        for request in all_requests():
            result = engine.evaluate(request)
            gate = result.steps[0]
            gated = [s for s in result.steps[1:] if s.name != "TT"]
            if gate.passed:
                assert all(not s.is_skipped for s in gated)
            else:
                assert len(gated) == 3
                assert all(s.is_skipped for s in gated)
                assert result.steps[-1].name == "TT"
                assert not result.steps[-1].is_skipped

    def test_recognized_methods_always_resolve(self, engine):
        for request in all_requests():
            if request.method in ("LOCAL", "SWIFT", "UNSPECIFIED"):
                assert engine.evaluate(request).route != "UNKNOWN"

    def test_module_level_evaluate_matches_engine(self, engine):
        request = make_request(currency="CNH", amount=5_000_001)
        assert evaluate(request) == engine.evaluate(request)
