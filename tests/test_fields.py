"""
Tests for field generators and per-field checks.

Every valid generator must pass its own check; every invalid generator
must fail it. Seeds are looped so a lucky draw cannot hide a bad branch.
"""

from datetime import date

import pytest

from paygen.core.engine import fields as f
from paygen.core.engine.fields import FieldContext, FieldRule
from paygen.core.engine.random_source import RandomSource
from paygen.core.models.request import OriginatingAccount

TODAY = date(2025, 2, 20)

SEEDS = range(40)


def _ctx(seed: int, **record) -> FieldContext:
    return FieldContext(rng=RandomSource(seed), today=TODAY, record=dict(record))


# ── Text ─────────────────────────────────────────────────────────────


class TestAccountName:
    def test_valid_names_pass(self):
        for seed in SEEDS:
            ctx = _ctx(seed)
            name = f.generate_account_name(ctx)
            assert f.check_account_name(name, ctx) == [], name
            assert 3 <= len(name) <= f.ACCOUNT_NAME_MAX

    def test_too_long(self, ctx):
        name = f.invalid_account_name(ctx)
        assert len(name) > f.ACCOUNT_NAME_MAX
        assert any("at most" in p for p in f.check_account_name(name, ctx))

    def test_blank(self, ctx):
        assert "must not be blank" in f.check_account_name("   ", ctx)
        assert "must not be blank" in f.check_account_name(None, ctx)

    def test_charset(self, ctx):
        assert f.check_account_name(f.blank_account_name(ctx), ctx)
        assert f.check_account_name("O'Neil", ctx)
        assert f.check_account_name("A.B & C/D-E", ctx) == []

    def test_clean_text(self):
        assert f.clean_text("Jones, Smith & O'Brien plc") == "Jones Smith & OBrien plc"


# ── Sort codes and account numbers ───────────────────────────────────


class TestBankDetails:
    def test_valid_sort_codes(self):
        for seed in SEEDS:
            ctx = _ctx(seed)
            code = f.generate_sort_code(ctx)
            assert f.check_sort_code(code, ctx) == []
            assert code[:2] in f.UK_SORT_CODE_PREFIXES

    def test_valid_account_numbers(self):
        for seed in SEEDS:
            ctx = _ctx(seed)
            number = f.generate_account_number(ctx)
            assert len(number) == 8 and number.isdigit()
            assert f.check_account_number(number, ctx) == []

    @pytest.mark.parametrize("value", ["000000", "12345", "1234567", "ABCDEF"])
    def test_bad_sort_codes(self, ctx, value):
        assert f.check_sort_code(value, ctx)

    def test_all_zeros_rejected(self, ctx):
        assert f.check_account_number(f.zero_account_number(ctx), ctx) == ["must not be all zeros"]

    def test_alpha_rejected(self, ctx):
        assert "must be numeric" in f.check_account_number(f.alpha_account_number(ctx), ctx)

    def test_originating_defaults_applied(self, rng):
        account = OriginatingAccount(sort_code="401276", account_number="41234567", account_name="ACME LTD")
        ctx = FieldContext(rng=rng, today=TODAY, originating=account)
        assert f.originating_sort_code(ctx) == "401276"
        assert f.originating_account_number(ctx) == "41234567"
        assert f.originating_account_name(ctx) == "ACME LTD"

    def test_originating_generated_without_defaults(self, ctx):
        assert f.check_sort_code(f.originating_sort_code(ctx), ctx) == []


# ── Payment reference ────────────────────────────────────────────────


class TestPaymentReference:
    def test_valid_references(self):
        for seed in SEEDS:
            ctx = _ctx(seed)
            ref = f.generate_payment_reference(ctx)
            assert f.REFERENCE_MIN <= len(ref) <= f.REFERENCE_MAX
            assert not ref.startswith("DDIC")
            assert f.check_payment_reference(ref, ctx) == []

    def test_invalid_references_fail(self):
        for seed in SEEDS:
            ctx = _ctx(seed)
            ref = f.invalid_payment_reference(ctx)
            assert f.check_payment_reference(ref, ctx), repr(ref)

    @pytest.mark.parametrize(
        "value, message",
        [
            ("DDIC12345", "must not start with 'DDIC'"),
            (" ABC12345", "must start with a letter or digit"),
            ("AAAAAAAAA", "must not repeat a single character"),
            ("ABC", "must be 7-17 characters"),
        ],
    )
    def test_specific_rules(self, ctx, value, message):
        assert message in f.check_payment_reference(value, ctx)

    def test_reserved_prefix(self, ctx):
        ref = f.reserved_prefix_reference(ctx)
        assert ref.startswith("DDIC")
        assert f.check_payment_reference(ref, ctx) == ["must not start with 'DDIC'"]


# ── Transaction code and amounts ─────────────────────────────────────


class TestTransactionCode:
    def test_valid(self):
        for seed in SEEDS:
            ctx = _ctx(seed)
            assert f.generate_transaction_code(ctx) in f.TRANSACTION_CODES

    def test_invalid(self, ctx):
        code = f.invalid_transaction_code(ctx)
        assert code not in f.TRANSACTION_CODES
        assert f.check_transaction_code(code, ctx)

    def test_zero_amount_property(self, rng):
        assert FieldContext(rng=rng, today=TODAY, record={"transaction_code": "0N"}).is_zero_amount
        assert not FieldContext(rng=rng, today=TODAY, record={"transaction_code": "17"}).is_zero_amount
        assert not FieldContext(rng=rng, today=TODAY).is_zero_amount


class TestAmounts:
    def test_decimal_amount_range(self):
        for seed in SEEDS:
            ctx = _ctx(seed)
            amount = f.generate_decimal_amount(ctx)
            assert f.check_decimal_amount(amount, ctx) == []
            assert 0.01 <= float(amount) <= 10000.00

    def test_decimal_negative_rejected(self, ctx):
        assert f.check_decimal_amount(f.negative_decimal_amount(ctx), ctx)
        assert f.check_decimal_amount("1.234", ctx)

    def test_pence_amount(self, ctx):
        assert f.check_pence_amount(f.generate_pence_amount(ctx), ctx) == []
        assert f.check_pence_amount(f.negative_pence_amount(ctx), ctx) == ["must not be negative"]
        assert f.check_pence_amount("abc", ctx) == ["must be a whole number of pence"]

    def test_mismatched_zero_amount(self, rng):
        zero_ctx = FieldContext(rng=rng, today=TODAY, record={"transaction_code": "0C"})
        paying_ctx = FieldContext(rng=rng, today=TODAY, record={"transaction_code": "01"})
        assert f.mismatched_zero_amount(zero_ctx) == "1"
        assert f.mismatched_zero_amount(paying_ctx) == "0"


class TestFixedAndEmpty:
    def test_fixed_zero(self, ctx):
        assert f.check_fixed_zero(f.fixed_zero(ctx), ctx) == []
        assert f.check_fixed_zero(f.non_zero_digit(ctx), ctx) == ["must be exactly 0"]

    def test_empty(self, ctx):
        assert f.check_empty(f.always_empty(ctx), ctx) == []
        assert f.check_empty("", ctx) == []
        assert f.check_empty("x", ctx) == ["must be empty"]


# ── Dates ────────────────────────────────────────────────────────────


class TestDates:
    def test_random_working_day_in_window(self):
        for seed in SEEDS:
            ctx = _ctx(seed)
            day = f.random_working_day(ctx, 2, 30)
            assert f.check_lead_time(day, ctx, 2, 30) == []

    def test_too_soon(self, ctx):
        # Thursday 20 Feb + 1 working day
        assert f.check_lead_time(date(2025, 2, 21), ctx, 2, 30)

    def test_weekend_rejected(self, ctx):
        assert "must be a working day" in f.check_lead_time(date(2025, 3, 1), ctx, 2, 30)

    def test_past_rejected(self, ctx):
        assert f.check_lead_time(date(2025, 2, 19), ctx, 0, 30)

    def test_julian(self):
        assert f.to_bacs_julian(date(2025, 2, 25)) == " 25056"
        assert f.from_bacs_julian(" 25056") == date(2025, 2, 25)
        assert f.from_bacs_julian("25001") == date(2025, 1, 1)

    @pytest.mark.parametrize("text", ["ABCDEF", "", " 2505", " 25400"])
    def test_julian_rejects_garbage(self, text):
        assert f.from_bacs_julian(text) is None


# ── FieldRule ────────────────────────────────────────────────────────


class TestFieldRule:
    def test_violations_prefixed_with_header(self, ctx):
        rule = FieldRule("sort", "Sort Code", f.generate_sort_code, f.alpha_sort_code, f.check_sort_code)
        assert rule.violations("000000", ctx) == ["Sort Code: must not be all zeros"]
        assert rule.violations(rule.valid(ctx), ctx) == []
        assert rule.invalidatable
