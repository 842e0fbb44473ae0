import io

import pytest

from xvutils.cformat import format_message, fprintf, printf


def test_plain_text_passes_through():
    assert format_message("hello world\n") == "hello world\n"


def test_decimal():
    assert format_message("n=%d", 1234) == "n=" + str(1234)
    assert format_message("%d", -17) == "-17"


def test_decimal_wraps_to_32_bits():
    assert format_message("%d", 2**31) == str(-(2**31))
    assert format_message("%d", 2**32 + 9) == str(9)


def test_unsigned_long_truncates():
    assert format_message("%l", 2**32 + 5) == "5"
    assert format_message("%l", 2**32 - 1) == str(2**32 - 1)


def test_hex_uppercase():
    assert format_message("%x", 255) == "FF"
    assert format_message("%x", -1) == "FFFFFFFF"


def test_pointer_is_sixteen_digits():
    out = format_message("%p", 0)
    assert out == "0x" + "0" * 16
    assert len(format_message("%p", 2**64 - 1)) == 18


def test_null_string():
    assert format_message("%s", None) == "(null)"


def test_string_and_char():
    assert format_message("%s-%c", "abc", "z") == "abc-z"
    assert format_message("%c", ord("Q")) == "Q"


def test_percent_and_unknown():
    assert format_message("100%%") == "100%"
    assert format_message("%q") == "%q"


def test_trailing_percent_dropped():
    assert format_message("abc%") == "abc"


def test_missing_argument_raises():
    with pytest.raises(TypeError):
        format_message("%d %d", 1)


def test_fprintf_writes_stream():
    buf = io.StringIO()
    fprintf(buf, "%s %d\n", "cat", 3)
    assert buf.getvalue() == format_message("%s %d\n", "cat", 3)


def test_printf_writes_stdout(capsys):
    printf("init: starting %s\n", "sh")
    assert capsys.readouterr().out == "init: starting sh\n"