import pytest

from checkout_router.catalog import Catalog, CatalogEntry
from checkout_router.errors import InputTooLong, TooManyServices, UnknownService, ValidationError
from checkout_router.observability import CheckoutObserver
from checkout_router.selection import SelectionParser, split_tokens
from checkout_router.selection.rules import ExactCodeRule, PrefixRule
from checkout_router.utils.text import normalize_service_text


class RecordingObserver(CheckoutObserver):
    def __init__(self):
        self.events = []

    def token_resolved(self, token, code, rule):
        self.events.append(("resolved", token, code, rule))

    def token_rejected(self, token, normalized, expected_prefixes):
        self.events.append(("rejected", token, normalized, list(expected_prefixes)))

    def duplicates_removed(self, count):
        self.events.append(("dedup", count))


def test_normalize_service_text():
    assert normalize_service_text("  Cover \t  Design\n— $149 ") == "cover design — $149"
    assert normalize_service_text("") == ""


def test_split_tokens_discards_empty():
    assert split_tokens(" INTFMT , ,COVER,, ") == ["INTFMT", "COVER"]
    assert split_tokens("") == []


@pytest.mark.parametrize("raw", ["intfmt", "INTFMT", "IntFmt", "  intFMT  "])
def test_exact_code_is_case_insensitive(parser, raw):
    assert parser.parse(raw) == ("INTFMT",)


@pytest.mark.parametrize("raw", ["Cover Design — $149", "cover   design", "Cover Design", "COVER DESIGN!"])
def test_fuzzy_prefix_tolerates_annotations(parser, raw):
    assert parser.parse(raw) == ("COVER",)


def test_fuzzy_prefix_requires_full_display_name(parser):
    with pytest.raises(UnknownService) as exc:
        parser.parse("Cover Desig")
    assert exc.value.token == "Cover Desig"
    assert exc.value.normalized == "cover desig"


def test_unknown_token_carries_raw_token(parser):
    with pytest.raises(UnknownService) as exc:
        parser.parse("INTFMT, Foo Bar")
    assert exc.value.token == "Foo Bar"
    assert "Foo Bar" in str(exc.value)
    assert isinstance(exc.value, ValidationError)
    assert exc.value.status_code == 400


def test_mixed_codes_and_display_text_keep_first_occurrence_order(parser):
    raw = "Cover Design — $149, intfmt, KDP Upload Preparation — $49"
    assert parser.parse(raw) == ("COVER", "INTFMT", "KDPPREP")


def test_duplicates_are_dropped_keeping_first(parser):
    raw = "COVER, Interior Formatting, cover design — $149, INTFMT, cover"
    assert parser.parse(raw) == ("COVER", "INTFMT")


def test_whitespace_and_comma_variants_are_equivalent(parser):
    base = parser.parse("INTFMT,COVER")
    assert parser.parse(" INTFMT ,,  COVER ,") == base
    assert parser.parse(",,INTFMT,\t,COVER") == base
    assert parser.parse("interior   formatting,cover design") == base


@pytest.mark.parametrize("raw", ["", None, "   ", ",, ,"])
def test_empty_input_yields_empty_order(parser, raw):
    assert parser.parse(raw) == ()


def test_input_too_long_checked_before_tokenizing(catalog):
    observer = RecordingObserver()
    parser = SelectionParser(catalog, max_length=10, observer=observer)
    with pytest.raises(InputTooLong) as exc:
        parser.parse("Foo Bar Baz Qux")
    assert exc.value.max_length == 10
    # Aucun jeton n'a été résolu ni rejeté
    assert observer.events == []


def test_input_at_max_length_is_accepted(catalog):
    parser = SelectionParser(catalog, max_length=len("INTFMT,COVER"))
    assert parser.parse("INTFMT,COVER") == ("INTFMT", "COVER")


def test_too_many_services_counted_after_dedup(catalog):
    parser = SelectionParser(catalog, max_services=2)
    # 5 jetons mais 2 codes distincts: accepté
    assert parser.parse("INTFMT,COVER,INTFMT,cover,Cover Design") == ("INTFMT", "COVER")
    with pytest.raises(TooManyServices) as exc:
        parser.parse("INTFMT,COVER,KDPPREP")
    assert exc.value.count == 3
    assert exc.value.max_services == 2


def test_default_bounds(parser):
    assert parser.max_length == 500
    assert parser.max_services == 20
    with pytest.raises(InputTooLong):
        parser.parse("INTFMT," * 100)


def test_result_has_no_duplicates_and_is_bounded_by_token_count(parser):
    raw = "cover, INTFMT, Cover Design, kdpprep, intfmt, KDP upload preparation"
    order = parser.parse(raw)
    assert len(order) == len(set(order))
    assert len(order) <= len(split_tokens(raw))


def test_rules_are_exact_first_then_prefix_in_catalog_order(parser, catalog):
    rules = parser.rules
    assert isinstance(rules[0], ExactCodeRule)
    assert [r.code for r in rules[1:]] == list(catalog.codes)
    assert all(isinstance(r, PrefixRule) for r in rules[1:])


def test_exact_code_wins_over_prefix_rule():
    # Le code COVER doit être résolu par la règle exacte même si un nom affiché commence par "cover"
    catalog = Catalog([
        CatalogEntry(code="BOOK", price_ref="price_book", display_name="Cover"),
        CatalogEntry(code="COVER", price_ref="price_cover", display_name="Design"),
    ])
    observer = RecordingObserver()
    parser = SelectionParser(catalog, observer=observer)
    assert parser.parse("cover") == ("COVER",)
    assert observer.events == [("resolved", "cover", "COVER", "exact")]
    assert parser.parse("Cover art") == ("BOOK",)


def test_observer_receives_checkpoints(catalog):
    observer = RecordingObserver()
    parser = SelectionParser(catalog, observer=observer)
    parser.parse("intfmt, Cover Design — $149, INTFMT")
    assert observer.events == [
        ("resolved", "intfmt", "INTFMT", "exact"),
        ("resolved", "Cover Design — $149", "COVER", "prefix"),
        ("resolved", "INTFMT", "INTFMT", "exact"),
        ("dedup", 1),
    ]

    with pytest.raises(UnknownService):
        parser.parse("Editing")
    assert observer.events[-1] == (
        "rejected",
        "Editing",
        "editing",
        ["interior formatting", "cover design", "kdp upload preparation"],
    )
