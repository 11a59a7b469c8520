from __future__ import annotations

import pytest

from ghnotice.utils import bot_id_from_token


def test_bot_id_from_token():
    assert bot_id_from_token("123456789:AAbb") == "123456789"
    assert bot_id_from_token(" 42:x ") == "42"


@pytest.mark.parametrize("token", [None, "", "nocolon", "abc:def", ":def", "123:", "1 2:x"])
def test_bot_id_from_bad_token(token):
    assert bot_id_from_token(token) is None
