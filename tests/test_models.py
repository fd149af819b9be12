"""
Tests for domain and transport models.
"""

import pytest
from pydantic import ValidationError

from paygen.core.errors import ConstraintViolationError, UnsupportedFormatError
from paygen.core.models import (
    FileFormat,
    FileMeta,
    GenerationRequest,
    OriginatingAccount,
    Settings,
    WidthVariant,
)
from paygen.core.models.params import FileParams, GenerateParams, RowParams
from paygen.core.models.request import DateFormat

# ── Request ──────────────────────────────────────────────────────────


class TestFileFormat:
    def test_resolve_case_insensitive(self):
        assert FileFormat.resolve("EAZIPAY") == FileFormat.EAZIPAY
        assert FileFormat.resolve(" sddirect ") == FileFormat.SDDIRECT

    def test_resolve_unknown(self):
        with pytest.raises(UnsupportedFormatError) as exc:
            FileFormat.resolve("Standard18")
        assert exc.value.file_format == "Standard18"

    def test_str(self):
        assert str(FileFormat.BACS18_PAYMENT_LINES) == "Bacs18PaymentLines"


class TestGenerationRequest:
    def test_defaults(self):
        request = GenerationRequest(file_format="SDDirect")
        assert request.row_count == 15
        assert request.include_headers
        assert request.width_variant == WidthVariant.WIDE
        assert request.date_format is None

    def test_unknown_format_is_validation_error(self):
        with pytest.raises(ValidationError):
            GenerationRequest(file_format="nope")


class TestFileMeta:
    def test_tokens(self):
        meta = FileMeta(
            file_format="x", row_count=1, column_count=1,
            has_header=False, is_valid_batch=False, extension="txt",
        )
        assert meta.header_token == "NH"
        assert meta.validity_token == "I"


# ── Transport params ─────────────────────────────────────────────────


class TestFileParams:
    def test_camel_case_aliases(self):
        params = FileParams.model_validate({
            "numberOfRows": 20,
            "hasInvalidRows": True,
            "forInlineEditing": False,
            "includeHeaders": False,
            "includeOptionalFields": ["payDate"],
            "dateFormat": "DD/MM/YYYY",
            "variant": "narrow",
            "originatingAccount": {"sortCode": "401276", "accountNumber": "41234567", "accountName": "ACME"},
        })
        request = params.to_request("EaziPay")
        assert request.row_count == 20
        assert request.inject_invalid_rows
        assert not request.allow_inline_edit
        assert request.date_format == DateFormat.DAY_SLASH
        assert request.width_variant == WidthVariant.NARROW
        assert request.originating_account.sort_code == "401276"

    @pytest.mark.parametrize(
        "body",
        [
            {"numberOfRows": "10"},
            {"numberOfRows": 0},
            {"hasInvalidRows": "true"},
            {"sun": "../etc"},
            {"unexpected": 1},
            {"dateFormat": "MM/DD/YYYY"},
        ],
    )
    def test_rejected(self, body):
        with pytest.raises(ValidationError):
            FileParams.model_validate(body)

    def test_row_ceiling(self):
        with pytest.raises(ConstraintViolationError):
            FileParams(row_count=11).to_request("SDDirect", max_rows=10)

    def test_unknown_format(self):
        with pytest.raises(UnsupportedFormatError):
            FileParams().to_request("nope")


    def test_with_defaults_fills_unset(self):
        defaults = FileParams.model_validate({"numberOfRows": 40, "hasInvalidRows": True, "sun": "ACME"})
        merged = FileParams.model_validate({"numberOfRows": 5}).with_defaults(defaults)
        assert merged.row_count == 5
        assert merged.inject_invalid_rows is True
        assert merged.sun == "ACME"

    def test_with_defaults_keeps_explicit_false(self):
        defaults = FileParams(inject_invalid_rows=True)
        merged = FileParams(inject_invalid_rows=False).with_defaults(defaults)
        assert merged.inject_invalid_rows is False

    def test_with_defaults_keeps_type(self):
        params = GenerateParams.model_validate({"fileType": "EaziPay"})
        merged = params.with_defaults(FileParams(row_count=3))
        assert isinstance(merged, GenerateParams)
        assert merged.to_request().row_count == 3

    def test_bad_originating_account(self):
        with pytest.raises(ValidationError):
            FileParams.model_validate({
                "originatingAccount": {"sortCode": "12-34-56", "accountNumber": "41234567", "accountName": "ACME"},
            })


class TestGenerateParams:
    def test_requires_file_type(self):
        with pytest.raises(ValidationError):
            GenerateParams.model_validate({"numberOfRows": 3})

    def test_to_request(self):
        params = GenerateParams.model_validate({"fileType": "bacs18", "numberOfRows": 3})
        request = params.to_request()
        assert request.file_format == FileFormat.BACS18_PAYMENT_LINES


class TestRowParams:
    def test_single_row(self):
        request = RowParams.model_validate({"variant": "DAILY"}).to_request("bacs18")
        assert request.row_count == 1
        assert request.width_variant == WidthVariant.NARROW


class TestOriginatingAccount:
    def test_valid(self):
        account = OriginatingAccount(sort_code="401276", account_number="41234567", account_name="ACME & SONS LTD")
        assert account.can_be_invalid is False

    def test_can_be_invalid_alias(self):
        account = OriginatingAccount.model_validate({
            "sortCode": "401276", "accountNumber": "41234567", "accountName": "ACME", "canBeInvalid": True,
        })
        assert account.can_be_invalid is True

    @pytest.mark.parametrize(
        "field, value",
        [
            ("sort_code", "12-34-56"),
            ("sort_code", "12345"),
            ("sort_code", "000000"),
            ("account_number", "1234"),
            ("account_number", "1234567X"),
            ("account_number", "00000000"),
            ("account_name", "Smith, Jones & Co Ltd"),
            ("account_name", "A" * 19),
            ("account_name", "   "),
            ("account_name", "ACME\n"),
        ],
    )
    def test_rejected(self, field, value):
        data = {"sort_code": "401276", "account_number": "41234567", "account_name": "ACME"}
        data[field] = value
        with pytest.raises(ValidationError):
            OriginatingAccount(**data)


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.output_root == "."
        assert settings.max_rows == 100_000
        assert settings.rate_limit.max_requests == 100
