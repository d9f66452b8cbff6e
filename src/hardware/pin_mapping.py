"""
Pin Mapping Table

Translates a configured pin number in one of the supported numbering
schemes into the canonical Broadcom (BCM) id used by RPi.GPIO and the PWM
daemon. Pins missing from the table (power, ground, ID EEPROM) are invalid.
"""

from typing import Dict, Optional, Tuple

from models.enums import PinScheme, ResourceKind

DEFAULT_SCHEME = PinScheme.BCMv2

# BCM 6 is used for ethernet on some boards and is banned by pi-blaster
PWM_RESERVED_PIN = 6

# (BOARD, BCMv1, BCMv2, WPI); BCMv1 is None where revision 1 boards had no GPIO
_PIN_TABLE: Tuple[Tuple[int, Optional[int], int, int], ...] = (
    (3, 0, 2, 8),
    (5, 1, 3, 9),
    (7, 4, 4, 7),
    (8, 14, 14, 15),
    (10, 15, 15, 16),
    (11, 17, 17, 0),
    (12, 18, 18, 1),
    (13, 21, 27, 2),
    (15, 22, 22, 3),
    (16, 23, 23, 4),
    (18, 24, 24, 5),
    (19, 10, 10, 12),
    (21, 9, 9, 13),
    (22, 25, 25, 6),
    (23, 11, 11, 14),
    (24, 8, 8, 10),
    (26, 7, 7, 11),
    (29, None, 5, 21),
    (31, None, 6, 22),
    (32, None, 12, 26),
    (33, None, 13, 23),
    (35, None, 19, 24),
    (36, None, 16, 27),
    (37, None, 26, 25),
    (38, None, 20, 28),
    (40, None, 21, 29),
)

_COLUMNS = (PinScheme.BOARD, PinScheme.BCMv1, PinScheme.BCMv2, PinScheme.WPI)


def _build_lookup() -> Dict[PinScheme, Dict[int, int]]:
    lookup: Dict[PinScheme, Dict[int, int]] = {scheme: {} for scheme in _COLUMNS}
    for row in _PIN_TABLE:
        columns = dict(zip(_COLUMNS, row))
        for scheme, pin in columns.items():
            if pin is None:
                continue
            # BCMv1 boards address their own numbering; everything else is BCMv2
            canonical = columns[PinScheme.BCMv1] if scheme == PinScheme.BCMv1 else columns[PinScheme.BCMv2]
            lookup[scheme][pin] = canonical
    return lookup


_LOOKUP = _build_lookup()


def parse_scheme(raw) -> Optional[PinScheme]:
    """Return the PinScheme named by raw, or None when unknown"""
    if isinstance(raw, PinScheme):
        return raw
    if not isinstance(raw, str):
        return None
    for scheme in PinScheme:
        if scheme.value.lower() == raw.strip().lower():
            return scheme
    return None


def resolve_pin(pin, scheme: PinScheme = DEFAULT_SCHEME) -> Optional[int]:
    """
    Translate a configured pin into its canonical BCM id.

    Returns:
        The canonical pin id, or None if the pin is not a usable GPIO in that scheme
    """
    if isinstance(pin, bool) or not isinstance(pin, int):
        return None
    return _LOOKUP[scheme].get(pin)


def is_pin_allowed(canonical_pin: int, kind: ResourceKind, scheme: PinScheme = DEFAULT_SCHEME) -> bool:
    """The PWM daemon cannot drive the reserved pin, so LEDs may not claim it"""
    if kind != ResourceKind.LED:
        return True
    return not (scheme != PinScheme.BCMv1 and canonical_pin == PWM_RESERVED_PIN)


def valid_pins(scheme: PinScheme = DEFAULT_SCHEME) -> Tuple[int, ...]:
    return tuple(sorted(_LOOKUP[scheme]))
