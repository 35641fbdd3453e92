"""Tests for the `Option` returned by `find`."""

import pytest

import polyiter as pl


def test_some() -> None:
    opt = pl.Some(3)
    assert opt.is_some()
    assert not opt.is_none()
    assert opt.unwrap() == 3
    assert opt.expect("missing") == 3
    assert opt.unwrap_or(0) == 3
    assert opt.unwrap_or_else(lambda: 0) == 3
    assert opt.map(lambda n: n + 1) == pl.Some(4)
    assert opt.and_then(lambda n: pl.Some(str(n))) == pl.Some("3")
    assert opt.or_else(lambda: pl.Some(0)) is opt
    assert repr(opt) == "Some(value=3)"


def test_none() -> None:
    opt = pl.NONE
    assert opt.is_none()
    assert not opt.is_some()
    assert opt.unwrap_or(0) == 0
    assert opt.unwrap_or_else(lambda: 1) == 1
    assert opt.map(lambda n: n + 1) is pl.NONE
    assert opt.and_then(lambda n: pl.Some(n)) is pl.NONE
    assert opt.or_else(lambda: pl.Some(0)) == pl.Some(0)
    assert repr(opt) == "NONE"


def test_none_unwrap_raises() -> None:
    with pytest.raises(pl.OptionUnwrapError, match="unwrap"):
        pl.NONE.unwrap()
    with pytest.raises(pl.OptionUnwrapError, match="nothing found"):
        pl.NONE.expect("nothing found")


def test_find_results() -> None:
    assert pl.Iter.from_range(5).find(lambda n: n > 2).map(str).unwrap() == "3"
    assert pl.Iter.from_range(5).find(lambda n: n > 9).unwrap_or(-1) == -1
