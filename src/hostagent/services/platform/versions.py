from __future__ import annotations


def _components(version: str) -> list[int]:
    if not version or not version.strip():
        raise ValueError("Invalid version")
    out: list[int] = []
    for part in version.strip().split("."):
        try:
            out.append(int(part))
        except ValueError:
            raise ValueError(f"Invalid version {version!r}: component {part!r} is not numeric") from None
    return out


def version_compare(version_one: str, version_two: str) -> int:
    """
    Compares two dotted versions component by component, numerically.
    Missing trailing components count as 0, so "7" == "7.0".
    Returns -1, 0 or 1.
    """
    left = _components(version_one)
    right = _components(version_two)
    width = max(len(left), len(right))
    left += [0] * (width - len(left))
    right += [0] * (width - len(right))
    for a, b in zip(left, right):
        if a < b:
            return -1
        if a > b:
            return 1
    return 0
