"""Utilities to load build targets named on the command line."""

from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path
from typing import Any

from schemagraph.core.exceptions import TargetError


def load_target(target: str) -> Any:
    """Resolve ``module:attr`` or ``path/to/file.py:attr`` to an object.

    Dotted attribute paths (``module:Outer.Inner``) are followed.

    Raises:
        TargetError: If the target is malformed, the module cannot be
            imported, or the attribute does not exist
    """
    module_path, sep, attr_path = target.rpartition(":")
    if not sep or not module_path or not attr_path:
        raise TargetError(
            f"Target must look like 'module:attr' or 'file.py:attr': {target}",
            context={"target": target},
        )

    obj: Any = _import_module(module_path)
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise TargetError(
                f"Target attribute not found: {attr_path}",
                context={"target": target, "module": module_path},
            ) from exc
    return obj


def _import_module(module_path: str):
    """Import by module path or file path."""
    path_obj = Path(module_path)
    if path_obj.suffix == ".py" or path_obj.exists():
        spec = importlib.util.spec_from_file_location(path_obj.stem, path_obj)
        if spec is None or spec.loader is None:
            raise TargetError(f"Cannot load module from path: {module_path}")
        module = importlib.util.module_from_spec(spec)
        # type-hint resolution looks the module up by name
        sys.modules[spec.name] = module
        try:
            spec.loader.exec_module(module)  # type: ignore[arg-type]
        except FileNotFoundError as exc:
            sys.modules.pop(spec.name, None)
            raise TargetError(f"Target file not found: {module_path}") from exc
        return module

    try:
        return importlib.import_module(module_path)
    except ImportError as exc:
        raise TargetError(
            f"Failed to import target module '{module_path}': {exc}"
        ) from exc
