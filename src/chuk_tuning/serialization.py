"""
JSON interchange.

Values serialize to tagged dictionaries ({"type": "TimeMonzo", ...}) and
fractions to {"n": numerator, "d": denominator}. Decoding uses object
hooks: json calls the hook for every object from the innermost outwards,
so nested fractions and monzos are already revived by the time the
enclosing interval is seen.

    text = to_json(interval)
    interval = from_json(text)
"""

from __future__ import annotations

import json
from fractions import Fraction
from typing import Any, Callable

from chuk_tuning.core.interval import Interval
from chuk_tuning.core.literals import literal_reviver
from chuk_tuning.core.monzo import TimeMonzo, TimeReal
from chuk_tuning.core.numeric import fraction_reviver, fraction_to_json
from chuk_tuning.temper.basis import ValBasis
from chuk_tuning.temper.val import Val

ObjectHook = Callable[[dict[str, Any]], Any]


class TuningJSONEncoder(json.JSONEncoder):
    """JSON encoder for fractions and every value with a to_json method."""

    def default(self, o: Any) -> Any:
        if isinstance(o, Fraction):
            return fraction_to_json(o)
        to_json = getattr(o, "to_json", None)
        if callable(to_json):
            return to_json()
        return super().default(o)


def compose_revivers(*hooks: ObjectHook) -> ObjectHook:
    """
    Chain object hooks.

    Each hook receives the dictionary and either returns a revived value
    or the dictionary unchanged. The first hook that revives wins.
    """

    def hook(obj: dict[str, Any]) -> Any:
        for reviver in hooks:
            result = reviver(obj)
            if result is not obj:
                return result
        return obj

    return hook


tuning_object_hook = compose_revivers(
    fraction_reviver,
    literal_reviver,
    TimeMonzo.reviver,
    TimeReal.reviver,
    ValBasis.reviver,
    Val.reviver,
    Interval.reviver,
)


def to_json(value: Any, **kwargs: Any) -> str:
    """Serialize a value (or a structure of values) to a JSON string."""
    return json.dumps(value, cls=TuningJSONEncoder, **kwargs)


def from_json(text: str) -> Any:
    """Parse a JSON string produced by to_json."""
    return json.loads(text, object_hook=tuning_object_hook)
