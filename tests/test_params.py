import pytest

from pgxkit.params import Valuer, call_valuer_value, convert_driver_valuers


class _Fixed(Valuer):
    def __init__(self, result):
        self.result = result

    def value(self):
        return self.result


class _Failing(Valuer):
    def value(self):
        raise ValueError("cannot produce value")


class _EncodingValuer(Valuer):
    def value(self):
        return "from value"

    def encode_text(self, conn_info, buf):
        return buf + b"encoded"


def test_valuers_replaced_by_their_values():
    assert convert_driver_valuers([_Fixed(42), "x", None]) == [42, "x", None]


def test_input_sequence_left_untouched():
    valuer = _Fixed("v")
    args = [valuer]
    convert_driver_valuers(args)
    assert args[0] is valuer


def test_encoders_are_kept():
    encoder = _EncodingValuer()
    result = convert_driver_valuers([encoder])
    assert result[0] is encoder


def test_value_is_resolved_only_once():
    inner = _Fixed(7)
    result = convert_driver_valuers([_Fixed(inner)])
    assert result[0] is inner


def test_valuer_error_propagates():
    with pytest.raises(ValueError, match="cannot produce value"):
        convert_driver_valuers([_Failing()])


def test_call_valuer_value():
    assert call_valuer_value(_Fixed("abc")) == "abc"
    assert call_valuer_value(None) is None


def test_valuer_requires_value_method():
    with pytest.raises(TypeError):
        Valuer()