"""Tests for NameFormat decoding and the metric schemas."""

import pytest

from procdom.schemas.metrics import FetchResult, InstanceDomainSnapshot, Instance, NameFormat, Profile


class TestNameFormatDecode:
    def test_fixed_width_decodes_padded_names(self):
        fmt = NameFormat.fixed_width(5)
        assert fmt.decode("00100 init") == 100
        assert fmt.decode("04096 httpd") == 4096
        assert fmt.decode("00007 sh") == 7

    def test_fixed_width_reads_at_most_width_digits(self):
        fmt = NameFormat.fixed_width(5)
        assert fmt.decode("123456 big") == 12345

    def test_variable_decodes_plain_names(self):
        fmt = NameFormat.variable()
        assert fmt.decode("100 init") == 100
        assert fmt.decode("123456 big") == 123456
        assert fmt.decode("42") == 42

    def test_fixed_width_counts_sign_in_width(self):
        fmt = NameFormat.fixed_width(5)
        assert fmt.decode("-00012 x") == -1
        assert fmt.decode("+1234567") == 1234
        assert NameFormat.fixed_width(1).decode("7 x") == 7
        with pytest.raises(ValueError):
            NameFormat.fixed_width(1).decode("-7")

    def test_decode_rejects_names_without_leading_number(self):
        with pytest.raises(ValueError, match="cannot get id"):
            NameFormat.variable().decode("init")
        with pytest.raises(ValueError):
            NameFormat.fixed_width(5).decode("")

    def test_describe(self):
        assert NameFormat.fixed_width(5).describe() == "FixedWidth(5)"
        assert NameFormat.variable().describe() == "Variable"
        assert NameFormat.fixed_width(5).is_fixed
        assert not NameFormat.variable().is_fixed


class TestNameFormatMatches:
    def test_exact_fixed_width_prefix(self):
        fmt = NameFormat.fixed_width(5)
        assert fmt.name_matches("00100 init", 100)
        assert fmt.name_matches("00100", 100)

    def test_trailing_label_must_be_whitespace_separated(self):
        fmt = NameFormat.fixed_width(5)
        assert not fmt.name_matches("00100init", 100)
        assert fmt.name_matches("00100\tinit", 100)

    def test_leading_zeros_stripped_as_fallback(self):
        # a variable-width platform whose names are still zero padded
        assert NameFormat.variable().name_matches("00100 init", 100)

    def test_fixed_width_accepts_unpadded_name(self):
        assert NameFormat.fixed_width(5).name_matches("100 init", 100)

    def test_wrong_id_does_not_match(self):
        fmt = NameFormat.variable()
        assert not fmt.name_matches("1001 init", 100)
        assert not fmt.name_matches("200 init", 100)

    def test_id_zero(self):
        assert NameFormat.fixed_width(5).name_matches("00000 sched", 0)
        assert NameFormat.variable().name_matches("0 sched", 0)


def test_snapshot_ids_preserve_order():
    snapshot = InstanceDomainSnapshot(
        indom="3.9", instances=(Instance(id=100, name="00100 init"), Instance(id=7, name="00007 sh"))
    )
    assert snapshot.ids() == [100, 7]
    assert len(snapshot) == 2


def test_profile_covers():
    assert Profile(indom="3.9").covers(9999)
    restricted = Profile(indom="3.9", instances=frozenset({1234, 1}))
    assert restricted.covers(1)
    assert not restricted.covers(9999)


def test_fetch_result_wire_round_trip():
    result = FetchResult(values=[{"pmid": "3.8.0", "instances": [{"instance": 1, "value": 5}]}])
    wire = result.to_wire()
    assert wire["values"][0]["instances"] == [{"instance": 1, "value": 5}]
    assert FetchResult(**wire) == result
