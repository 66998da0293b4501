"""Path algebra for normalizing source paths against a project root.

Everything here except `canonicalize` is pure: paths are treated as
sequences of components and never touched on disk.
"""

import os
from pathlib import Path, PurePath

from .exceptions import CanonicalizationError, NoRelativePathError

CUR_DIR = "."
PARENT_DIR = ".."


def path_components(path: str | os.PathLike[str]) -> list[str]:
    """Split a path into components.

    A leading `./` is kept as a `.` component. Interior `.` components and
    trailing separators are dropped, the same as `PurePath.parts`.
    """
    text = os.fspath(path)
    parts = list(PurePath(text).parts)
    if text == CUR_DIR or text.startswith(CUR_DIR + os.sep) or text.startswith("./"):
        parts.insert(0, CUR_DIR)
    return parts


def relative_parts(
    path: str | os.PathLike[str], base: str | os.PathLike[str]
) -> list[str]:
    """Compute the components of the path leading from `base` to `path`.

    Args:
        path: The target path.
        base: The directory the result is relative to.

    Returns:
        Components of the relative path. When `path` is absolute and `base`
        is relative, the components of `path` itself.

    Raises:
        NoRelativePathError: If `path` is relative and `base` absolute, or
            if `base` has a `..` component where the two diverge.
    """
    target = PurePath(path)
    origin = PurePath(base)

    if target.is_absolute() != origin.is_absolute():
        if target.is_absolute():
            return list(target.parts)
        raise NoRelativePathError(target, origin)

    ita = iter(path_components(path))
    itb = iter(path_components(base))
    comps: list[str] = []

    while True:
        a = next(ita, None)
        b = next(itb, None)
        if a is None and b is None:
            break
        if b is None:
            comps.append(a)
            comps.extend(ita)
            break
        if a is None:
            comps.append(PARENT_DIR)
        elif not comps and a == b:
            continue
        elif b == CUR_DIR:
            comps.append(a)
        elif b == PARENT_DIR:
            raise NoRelativePathError(target, origin)
        else:
            comps.append(PARENT_DIR)
            comps.extend(PARENT_DIR for _ in itb)
            comps.append(a)
            comps.extend(ita)
            break

    return comps


def relative_path(
    path: str | os.PathLike[str], base: str | os.PathLike[str]
) -> PurePath:
    """Get the relative path from `base` to `path`.

    Examples:
        >>> relative_path("/this/should/form/b/rel/path", "/this/should/form/a/rel/path")
        PurePosixPath('../../../b/rel/path')

    Raises:
        NoRelativePathError: If no relative path exists.
    """
    # Equal paths give no components, which pathlib renders as "."
    return PurePath(*relative_parts(path, base))


def canonicalize(path: str | os.PathLike[str]) -> Path:
    """Resolve symlinks, `.` and `..` in an existing path.

    Raises:
        CanonicalizationError: If the path does not exist or cannot be
            resolved.
    """
    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise CanonicalizationError(os.fspath(path), str(e)) from e
