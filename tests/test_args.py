import pytest

from stufflib.args import Args

ARGV = ["prog", "input.png", "-v", "--level=3", "out.png"]


def test_positional_and_optional_counts():
    args = Args(ARGV)
    assert args.count_positional() == 2
    assert args.count_positional() + args.count_optional() == len(ARGV) - 1


def test_get_positional():
    args = Args(ARGV)
    assert args.get_positional(0) == "input.png"
    assert args.get_positional(1) == "out.png"
    assert args.get_positional(2) is None


def test_help_flag():
    assert Args(["prog", "x", "-h"]).contains_help_flag()
    assert Args(["prog", "--help"]).contains_help_flag()
    assert not Args(ARGV).contains_help_flag()
    assert not Args(["-h"]).contains_help_flag()


def test_is_flag():
    args = Args(ARGV)
    assert args.is_flag(2)
    assert not args.is_flag(1)
    assert not args.is_flag(99)


def test_find_optional():
    args = Args(ARGV)
    assert args.find_optional("--level") == "--level=3"
    assert args.find_optional("") is None
    assert args.find_optional("--missing") is None


def test_parse_flag():
    args = Args(ARGV)
    assert args.parse_flag("-v")
    assert not args.parse_flag("--quiet")


def test_parse_int():
    args = Args(ARGV + ["--mask=0xff", "--k=42abc"])
    assert args.parse_int("--level", 10) == 3
    assert args.parse_int("--mask", 16) == 0xFF
    assert args.parse_int("--k", 10) == 42


def test_parse_int_missing_value():
    args = Args(ARGV)
    assert args.parse_int("--missing", 10) == 0
    assert args.parse_int("-v", 10) == args.parse_int("--missing", 10)


def test_parse_int_auto_base():
    args = Args(["prog", "--n=0x1f", "--m=1f"])
    assert args.parse_int("--n", 0) == args.parse_int("--m", 16)


def test_parse_int_bad_base():
    with pytest.raises(ValueError):
        Args(["prog", "--n=1"]).parse_int("--n", 99)