"""
Unit tests for parameter encoding (Subtask 1.1).

Tests cover:
- Bound validation
- Encoding and decoding accuracy
- Random encodings
- Integer parameters
- Building parameter lists from bound tuples
"""

import pytest
import numpy as np

from src.genalgo.core.parameter import Parameter, build_parameters
from src.genalgo.exceptions import InvalidBounds, GenalgoError


class TestParameterValidation:
    """Test suite for parameter construction."""

    def test_valid_parameter(self):
        """Test creating a parameter with valid bounds."""
        param = Parameter(lower=-1.0, upper=3.0, bits=12, initial=0.5)

        assert param.lower == -1.0
        assert param.upper == 3.0
        assert param.bits == 12
        assert param.initial == 0.5
        assert param.max_value == 4095
        assert param.span == 4.0

    def test_equal_bounds_rejected(self):
        """Test that lower == upper is rejected."""
        with pytest.raises(InvalidBounds):
            Parameter(lower=1.0, upper=1.0)

    def test_inverted_bounds_rejected(self):
        """Test that lower > upper is rejected."""
        with pytest.raises(InvalidBounds):
            Parameter(lower=5, upper=1)

    def test_zero_width_rejected(self):
        """Test that an encoding width below one bit is rejected."""
        with pytest.raises(InvalidBounds):
            Parameter(lower=0, upper=1, bits=0)

    def test_invalid_bounds_is_value_error(self):
        """Test that bound errors are catchable as ValueError and GenalgoError."""
        with pytest.raises(ValueError):
            Parameter(lower=2, upper=1)
        with pytest.raises(GenalgoError):
            Parameter(lower=2, upper=1)

    def test_from_data_requires_two_values(self):
        """Test that fewer than two bound values are rejected."""
        with pytest.raises(InvalidBounds):
            Parameter.from_data([1.0])
        with pytest.raises(InvalidBounds):
            Parameter.from_data([])

    def test_from_data_reads_initial_value(self):
        """Test that the optional third value becomes the initial value."""
        param = Parameter.from_data([0, 10, 4], bits=8)

        assert param.lower == 0
        assert param.upper == 10
        assert param.initial == 4
        assert param.bits == 8

        assert Parameter.from_data([0, 10]).initial is None

    def test_parameters_are_immutable(self):
        """Test that parameters cannot be changed after construction."""
        param = Parameter(lower=0, upper=1)

        with pytest.raises(Exception):
            param.lower = -1


class TestEncoding:
    """Test suite for encode/decode."""

    def test_encoded_width(self):
        """Test that encodings are exactly ``bits`` characters of 0/1."""
        param = Parameter(lower=0, upper=1, bits=10)

        bits = param.encode(0.3)
        assert len(bits) == 10
        assert set(bits) <= {"0", "1"}

    def test_bounds_map_to_extreme_codes(self):
        """Test that the bounds encode to all zeros and all ones."""
        param = Parameter(lower=-3.0, upper=7.0, bits=8)

        assert param.encode(-3.0) == "00000000"
        assert param.encode(7.0) == "11111111"
        assert param.decode("00000000") == -3.0
        assert param.decode("11111111") == 7.0

    def test_encode_five_in_eight_bits(self, ten_bit_parameter):
        """Test encoding 5 on [0, 10] with 8 bits."""
        value = ten_bit_parameter.decode(ten_bit_parameter.encode(5))

        assert abs(value - 5) <= 10 / 255

    def test_round_trip_within_quantization_step(self, rng):
        """Test that every in-bounds value round-trips within one step."""
        for lower, upper, bits in [(0, 10, 8), (-2.5, 2.5, 16), (-100, 1000, 12), (0, 1, 3)]:
            param = Parameter(lower=lower, upper=upper, bits=bits)
            step = param.quantization_step

            for value in rng.uniform(lower, upper, size=200):
                decoded = param.decode(param.encode(value))
                assert abs(decoded - value) <= step
                assert lower <= decoded <= upper

    def test_msb_first(self):
        """Test that the most significant bit comes first."""
        param = Parameter(lower=0, upper=15, bits=4)

        assert param.encode(1) == "0001"
        assert param.encode(8) == "1000"
        assert param.decode("0100") == pytest.approx(4)

    def test_out_of_bounds_values_are_clamped(self):
        """Test that values outside the bounds saturate the encoding."""
        param = Parameter(lower=0, upper=1, bits=6)

        assert param.encode(-5) == "000000"
        assert param.encode(9) == "111111"

    def test_single_bit_parameter(self):
        """Test a one-bit parameter only holds its bounds."""
        param = Parameter(lower=2, upper=4, bits=1)

        assert param.decode(param.encode(2)) == 2
        assert param.decode(param.encode(4)) == 4
        assert param.quantization_step == 2

    def test_decode_rejects_wrong_width(self):
        """Test decoding a bit string of the wrong length."""
        param = Parameter(lower=0, upper=1, bits=8)

        with pytest.raises(ValueError):
            param.decode("0101")

    def test_random_encoding(self, rng):
        """Test random encodings cover the code range."""
        param = Parameter(lower=0, upper=1, bits=4)

        codes = {param.encode(rng=rng) for _ in range(500)}

        assert all(len(code) == 4 for code in codes)
        assert len(codes) == 16

    def test_random_encoding_requires_generator(self):
        """Test that a random encoding without a generator fails."""
        param = Parameter(lower=0, upper=1)

        with pytest.raises(ValueError):
            param.encode()

    def test_random_encoding_is_reproducible(self):
        """Test that equal seeds give equal random encodings."""
        param = Parameter(lower=0, upper=1, bits=32)

        first = param.encode(rng=np.random.default_rng(7))
        second = param.encode(rng=np.random.default_rng(7))

        assert first == second


class TestIntegerParameters:
    """Test suite for integer-valued parameters."""

    def test_decodes_to_int(self):
        """Test that integer parameters decode to ints."""
        param = Parameter(lower=0, upper=10, bits=8, integer=True)

        value = param.decode(param.encode(3))

        assert isinstance(value, int)
        assert value == 3

    def test_every_integer_round_trips(self):
        """Test that all integers in range survive a round trip."""
        param = Parameter(lower=0, upper=10, bits=8, integer=True)

        for value in range(11):
            assert param.decode(param.encode(value)) == value

    def test_fractional_bounds_decode_within_bounds(self):
        """Test that rounding never leaves fractional bounds."""
        param = Parameter(lower=0.2, upper=3.7, bits=8, integer=True)

        assert param.decode("11111111") == 3
        assert param.decode("00000000") == 1
        for code in range(256):
            value = param.decode(format(code, "08b"))
            assert 0.2 <= value <= 3.7

    def test_bounds_without_integer_rejected(self):
        """Test that integer parameters need an integer within bounds."""
        with pytest.raises(InvalidBounds):
            Parameter(lower=0.2, upper=0.7, bits=8, integer=True)


class TestBuildParameters:
    """Test suite for building parameter lists."""

    def test_shared_width(self):
        """Test building parameters with one shared width."""
        params = build_parameters([(0, 1), (-5, 5, 2)], bits=12)

        assert len(params) == 2
        assert all(p.bits == 12 for p in params)
        assert params[1].initial == 2

    def test_per_parameter_widths(self):
        """Test building parameters with one width each."""
        params = build_parameters([(0, 1), (0, 2), (0, 3)], bits=[4, 8, 16])

        assert [p.bits for p in params] == [4, 8, 16]

    def test_width_count_mismatch(self):
        """Test that a wrong number of widths is rejected."""
        with pytest.raises(InvalidBounds):
            build_parameters([(0, 1), (0, 2)], bits=[4])

    def test_invalid_tuple_propagates(self):
        """Test that one bad bound tuple fails the whole build."""
        with pytest.raises(InvalidBounds):
            build_parameters([(0, 1), (3, 3)])
