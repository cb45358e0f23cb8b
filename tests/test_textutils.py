import pytest

from minishellpy.textutils import atoi, atoi_base, split, strtrim, substr


@pytest.mark.parametrize("number", [0, 7, 42, -13, 2147483647, -2147483648])
def test_atoi_round_trips_decimal(number):
    assert atoi(str(number)) == number


@pytest.mark.parametrize("prefix", [" ", "\t", "\n\v\f\r ", "   "])
def test_atoi_skips_leading_whitespace(prefix):
    assert atoi(prefix + "-12") == atoi("-12")


def test_atoi_ignores_trailing_garbage():
    assert atoi("+305xyz 9") == atoi("305")


def test_atoi_without_digits_is_zero():
    assert atoi("abc") == 0
    assert atoi("-") == atoi("")


def test_atoi_single_sign_only():
    assert atoi("--5") == atoi("x")


@pytest.mark.parametrize("number", [0, 1, 255, 4096, 123456])
def test_atoi_base_hex_round_trip(number):
    assert atoi_base(format(number, "x"), "0123456789abcdef") == number


@pytest.mark.parametrize("number", [0, 5, 1023])
def test_atoi_base_binary_round_trip(number):
    assert atoi_base(format(number, "b"), "01") == number


def test_atoi_base_is_case_insensitive():
    base = "0123456789abcdef"
    assert atoi_base("BeEf", base) == atoi_base("beef", base)


def test_atoi_base_sign_and_stop():
    base = "0123456789abcdef"
    assert atoi_base("  -ffzz", base) == -atoi_base("ff", base)


def test_split_drops_empty_fields():
    assert split(",,a,,b,", ",") == ["a", "b"]


def test_split_path_like():
    assert split("/usr/bin:/bin", ":") == ["/usr/bin", "/bin"]


def test_split_only_separators():
    assert split(",,,", ",") == []
    assert split("", ",") == []


def test_split_empty_separator_keeps_whole_text():
    assert split("a b", "") == ["a b"]


def test_split_rejects_long_separator():
    with pytest.raises(ValueError):
        split("a::b", "::")


def test_split_fields_never_contain_separator():
    fields = split("x;y;;z;", ";")
    assert all(";" not in field and field for field in fields)
    assert ";".join(fields) == "x;y;z"


def test_strtrim_both_ends():
    assert strtrim("xyhixy", "xy") == "hi"


def test_strtrim_empty_set_is_identity():
    assert strtrim("  keep  ", "") == "  keep  "


def test_strtrim_everything():
    assert strtrim("aaaa", "a") == ""


def test_substr_inside():
    assert substr("hello", 1, 3) == "hello"[1:4]


def test_substr_past_end():
    assert substr("abc", 5, 2) == ""
    assert substr("abc", 1, 100) == "bc"


def test_substr_rejects_negative():
    with pytest.raises(ValueError):
        substr("abc", -1, 2)