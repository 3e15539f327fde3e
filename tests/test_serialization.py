"""
Tests for JSON interchange.
"""

import json
import math
from fractions import Fraction

import pytest

from chuk_tuning.constants import IntervalDomain
from chuk_tuning.core import FJS, Color, Interval, Pythagorean, TimeMonzo, TimeReal
from chuk_tuning.serialization import (
    TuningJSONEncoder,
    compose_revivers,
    from_json,
    to_json,
    tuning_object_hook,
)
from chuk_tuning.temper import Val, ValBasis


class TestEncoding:
    """Tests for the JSON encoder."""

    def test_fraction(self) -> None:
        """Fractions become numerator/denominator pairs."""
        assert json.loads(to_json(Fraction(3, 2))) == {"n": 3, "d": 2}

    def test_monzo_tagged(self) -> None:
        """Monzos carry a type tag."""
        data = json.loads(to_json(TimeMonzo.from_fraction(Fraction(3, 2), 3)))
        assert data["type"] == "TimeMonzo"
        assert data["primeExponents"] == [{"n": -1, "d": 1}, {"n": 1, "d": 1}, {"n": 0, "d": 1}]

    def test_unknown_rejected(self) -> None:
        """Values without a JSON form still fail."""
        with pytest.raises(TypeError):
            json.dumps(object(), cls=TuningJSONEncoder)


class TestRoundTrip:
    """Tests for decoding what was encoded."""

    def test_monzo(self) -> None:
        """Exact monzos keep every field."""
        monzo = TimeMonzo.from_fractional_frequency(Fraction(800, 3))
        assert from_json(to_json(monzo)).strict_equals(monzo)

    def test_real(self) -> None:
        """Reals keep their value."""
        real = TimeReal.from_value(math.pi)
        assert from_json(to_json(real)).strict_equals(real)

    def test_real_nan(self) -> None:
        """NaN survives."""
        real = TimeReal.from_value(math.nan)
        assert from_json(to_json(real)).strict_equals(real)

    def test_interval(self) -> None:
        """Intervals keep their domain, steps, node and metadata."""
        interval = Interval(
            TimeMonzo.from_fraction(Fraction(7, 4)),
            IntervalDomain.LOGARITHMIC,
            1,
            FJS(Pythagorean("m", 7), (7,), ups=1),
            Color("red"),
            "seventh",
            {3, 1},
        )
        revived = from_json(to_json(interval))
        assert revived.strict_equals(interval)
        assert revived.node == interval.node
        assert revived.color == Color("red")
        assert revived.label == "seventh"
        assert revived.tracking_ids == {1, 3}

    def test_val(self) -> None:
        """Vals keep their basis."""
        val = Val.from_basis_map([10, 16, 28], ValBasis.from_fractions([2, 3, 7]))
        revived = from_json(to_json(val))
        assert revived == val
        assert str(revived) == "<10 16 28]@2.3.7"

    def test_nested(self) -> None:
        """Containers of values decode element by element."""
        data = {"scale": [Interval.from_fraction("5/4"), Interval.from_fraction("3/2")]}
        revived = from_json(to_json(data))
        assert [str(i) for i in revived["scale"]] == ["5/4", "3/2"]


class TestRevivers:
    """Tests for composing object hooks."""

    def test_plain_objects_pass(self) -> None:
        """Untagged dictionaries are left alone."""
        assert tuning_object_hook({"name": "x"}) == {"name": "x"}

    def test_first_reviver_wins(self) -> None:
        """Hooks run in order until one revives."""
        hook = compose_revivers(lambda obj: obj, lambda obj: "second", lambda obj: "third")
        assert hook({}) == "second"
