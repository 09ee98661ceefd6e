"""Tests for validated scalars: email, phone, URL, locale."""

import pickle
import string

import phonenumbers
import pycountry
import pytest
from hypothesis import assume, given
from hypothesis import strategies as st
from pydantic import TypeAdapter

from linkedin_voyager.exceptions import InvalidFormatError
from linkedin_voyager.scalars import EmailAddress, Locale, PhoneNumber, Url


def _is_valid(cls, raw, *args):
    try:
        cls(raw, *args)
    except InvalidFormatError:
        return False
    return True


def _email_grammar(raw: str) -> bool:
    """Reference statement of the email rule."""
    if any(ch in string.whitespace for ch in raw) or raw.count("@") != 1:
        return False
    local, domain = raw.split("@")
    labels = domain.split(".")
    return bool(local) and len(labels) >= 2 and all(labels)


_LABEL = st.text(alphabet=string.ascii_lowercase + string.digits, min_size=1, max_size=10)


class TestEmailAddress:
    @pytest.mark.parametrize("raw", ["ada@analytical.example", "a.b+c@mail.co.uk", "x@y.z"])
    def test_valid(self, raw):
        email = EmailAddress(raw)
        assert str(email) == raw

    @pytest.mark.parametrize("raw", [
        "not-an-email",
        "@example.com",
        "ada@",
        "ada@example",
        "ada@@example.com",
        "ada@example..com",
        "ada@.example.com",
        "ada lovelace@example.com",
        "ada@example.com ",
    ])
    def test_invalid(self, raw):
        with pytest.raises(InvalidFormatError) as exc:
            EmailAddress(raw)
        assert exc.value.code == "InvalidFormat"
        assert exc.value.raw == raw

    def test_not_a_string(self):
        with pytest.raises(InvalidFormatError):
            EmailAddress(42)

    def test_domain(self):
        assert EmailAddress("ada@analytical.example").domain == "analytical.example"

    @given(local=_LABEL, labels=st.lists(_LABEL, min_size=2, max_size=4))
    def test_generated_valid(self, local, labels):
        assert _is_valid(EmailAddress, f"{local}@{'.'.join(labels)}")

    @given(st.text(alphabet="ab@. \t", max_size=12))
    def test_accepts_exactly_the_grammar(self, raw):
        assert _is_valid(EmailAddress, raw) == _email_grammar(raw)


class TestPhoneNumber:
    def test_international_is_normalized_to_e164(self):
        phone = PhoneNumber("+1 650-253-0000")
        assert phone.value == "+16502530000"
        assert str(phone) == "+16502530000"
        assert phone.raw == "+1 650-253-0000"
        assert phone.country_code == 1

    def test_national_number_needs_region(self):
        assert not _is_valid(PhoneNumber, "(650) 253-0000")
        assert PhoneNumber("(650) 253-0000", "US").value == "+16502530000"

    @pytest.mark.parametrize("raw", ["12", "abc", "", "+1 000"])
    def test_invalid(self, raw):
        assert not _is_valid(PhoneNumber, raw)

    def test_equal_by_canonical_value(self):
        assert PhoneNumber("+1 650-253-0000") == PhoneNumber("+16502530000")

    def test_pickle_keeps_region(self):
        phone = PhoneNumber("(650) 253-0000", "US")
        again = pickle.loads(pickle.dumps(phone))
        assert again == phone
        assert again.region == "US"

    @given(st.sampled_from(sorted(phonenumbers.SUPPORTED_REGIONS)))
    def test_example_numbers_of_every_region(self, region):
        example = phonenumbers.example_number(region)
        assume(example is not None)
        e164 = phonenumbers.format_number(example, phonenumbers.PhoneNumberFormat.E164)
        international = phonenumbers.format_number(example, phonenumbers.PhoneNumberFormat.INTERNATIONAL)
        national = phonenumbers.format_number(example, phonenumbers.PhoneNumberFormat.NATIONAL)
        assert PhoneNumber(e164).value == e164
        assert PhoneNumber(international).value == e164
        assert PhoneNumber(national, region).value == e164

    @given(st.text(alphabet=string.ascii_letters + " -", max_size=15), st.sampled_from(["US", "GB", None]))
    def test_text_without_digits_rejected(self, raw, region):
        assert not _is_valid(PhoneNumber, raw, region)


class TestUrl:
    def test_valid_keeps_raw_text(self):
        url = Url("https://www.linkedin.com/in/ada-lovelace")
        assert str(url) == "https://www.linkedin.com/in/ada-lovelace"
        assert url.host == "www.linkedin.com"

    @pytest.mark.parametrize("raw", [
        "ftp://example.com/file",
        "not a url",
        "https://",
        " https://example.com",
        "example.com",
    ])
    def test_invalid(self, raw):
        assert not _is_valid(Url, raw)

    @given(
        labels=st.lists(_LABEL, min_size=1, max_size=3),
        tld=st.text(alphabet=string.ascii_lowercase, min_size=2, max_size=6),
        path=_LABEL,
    )
    def test_generated_valid(self, labels, tld, path):
        assert _is_valid(Url, f"https://{'.'.join(labels)}.{tld}/{path}")


class TestLocale:
    @pytest.mark.parametrize("raw, expected", [
        ("en", "en"),
        ("en_US", "en_US"),
        ("en-us", "en_US"),
        ("FR_fr", "fr_FR"),
        ({"language": "en", "country": "GB"}, "en_GB"),
        ({"language": "de"}, "de"),
    ])
    def test_valid(self, raw, expected):
        assert str(Locale(raw)) == expected

    @pytest.mark.parametrize("raw", ["xx", "english", "en_XX", "en_USA", "", {"country": "US"}])
    def test_invalid(self, raw):
        assert not _is_valid(Locale, raw)

    def test_fragment(self):
        locale = Locale("en-us")
        assert locale.language == "en"
        assert locale.country == "US"
        assert locale.to_fragment() == {"language": "en", "country": "US"}

    @given(
        language=st.sampled_from(sorted(lang.alpha_2 for lang in pycountry.languages if hasattr(lang, "alpha_2"))),
        country=st.sampled_from(sorted(c.alpha_2 for c in pycountry.countries)),
    )
    def test_every_iso_pair(self, language, country):
        locale = Locale(f"{language}-{country.lower()}")
        assert str(locale) == f"{language.lower()}_{country.upper()}"

    @given(st.text(alphabet=string.ascii_lowercase, min_size=2, max_size=2))
    def test_language_codes_match_iso_639(self, code):
        assert _is_valid(Locale, code) == (pycountry.languages.get(alpha_2=code) is not None)

    @given(st.text(alphabet=string.ascii_uppercase, min_size=2, max_size=2))
    def test_country_codes_match_iso_3166(self, code):
        assert _is_valid(Locale, f"en_{code}") == (pycountry.countries.get(alpha_2=code) is not None)


class TestScalarValueSemantics:
    def test_immutable(self):
        email = EmailAddress("ada@analytical.example")
        with pytest.raises(AttributeError):
            email.value = "x@y.z"

    def test_different_kinds_never_equal(self):
        assert EmailAddress("a@b.co") != Url("https://b.co")

    def test_pydantic_validates_from_string(self):
        adapter = TypeAdapter(EmailAddress)
        assert adapter.validate_python("ada@analytical.example") == EmailAddress("ada@analytical.example")
        with pytest.raises(ValueError):
            adapter.validate_python("not-an-email")
