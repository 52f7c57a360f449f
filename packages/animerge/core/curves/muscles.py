"""Humanoid muscle-axis property names.

Muscle curves live on the rig root with the animator as target kind. The
table order is stable and part of the public contract.
"""

from __future__ import annotations

_TRUNK = (
    "Spine Front-Back",
    "Spine Left-Right",
    "Spine Twist Left-Right",
    "Chest Front-Back",
    "Chest Left-Right",
    "Chest Twist Left-Right",
    "UpperChest Front-Back",
    "UpperChest Left-Right",
    "UpperChest Twist Left-Right",
)

_HEAD = (
    "Neck Nod Down-Up",
    "Neck Tilt Left-Right",
    "Neck Turn Left-Right",
    "Head Nod Down-Up",
    "Head Tilt Left-Right",
    "Head Turn Left-Right",
    "Left Eye Down-Up",
    "Left Eye In-Out",
    "Right Eye Down-Up",
    "Right Eye In-Out",
    "Jaw Close",
    "Jaw Left-Right",
)


def _arm(side: str) -> tuple[str, ...]:
    return (
        f"{side} Shoulder Down-Up",
        f"{side} Shoulder Front-Back",
        f"{side} Arm Down-Up",
        f"{side} Arm Front-Back",
        f"{side} Arm Twist In-Out",
        f"{side} Forearm Stretch",
        f"{side} Forearm Twist In-Out",
        f"{side} Hand Down-Up",
        f"{side} Hand In-Out",
    )


def _leg(side: str) -> tuple[str, ...]:
    return (
        f"{side} Upper Leg Front-Back",
        f"{side} Upper Leg In-Out",
        f"{side} Upper Leg Twist In-Out",
        f"{side} Lower Leg Stretch",
        f"{side} Lower Leg Twist In-Out",
        f"{side} Foot Up-Down",
        f"{side} Foot Twist In-Out",
        f"{side} Toes Up-Down",
    )


def _fingers(hand: str) -> tuple[str, ...]:
    names: list[str] = []
    for finger in ("Thumb", "Index", "Middle", "Ring", "Little"):
        names += [
            f"{hand}.{finger}.1 Stretched",
            f"{hand}.{finger}.Spread",
            f"{hand}.{finger}.2 Stretched",
            f"{hand}.{finger}.3 Stretched",
        ]
    return tuple(names)


MUSCLE_AXIS_NAMES: tuple[str, ...] = (
    *_TRUNK,
    *_HEAD,
    *_arm("Left"),
    *_arm("Right"),
    *_leg("Left"),
    *_leg("Right"),
    *_fingers("LeftHand"),
    *_fingers("RightHand"),
)

MUSCLE_AXIS_NAME_SET: frozenset[str] = frozenset(MUSCLE_AXIS_NAMES)
