from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path

from embedkit.core.errors import ConfigurationError
from embedkit.core.hashing import compute_bytes_digest
from embedkit.domain.models.resource import ResourceDirectory


def _module_name_for(package_dir: Path) -> str:
    digest = compute_bytes_digest(str(package_dir).encode("utf-8"))
    return f"_embedkit_generated_{digest[:16]}"


def load_resource_directory(package_dir: Path) -> ResourceDirectory:
    """Import a generated package from disk and return its resource directory."""
    package_dir = package_dir.expanduser().resolve()
    init_path = package_dir / "__init__.py"
    if not init_path.is_file():
        raise ConfigurationError(f"Not a generated resource package: {package_dir}")

    name = _module_name_for(package_dir)
    for loaded in [m for m in sys.modules if m == name or m.startswith(f"{name}.")]:
        del sys.modules[loaded]
    importlib.invalidate_caches()

    spec = importlib.util.spec_from_file_location(
        name,
        str(init_path),
        submodule_search_locations=[str(package_dir)],
    )
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Unable to load generated resource package: {package_dir}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module

    previous = sys.dont_write_bytecode
    sys.dont_write_bytecode = True
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(name, None)
        raise
    finally:
        sys.dont_write_bytecode = previous

    directory = getattr(module, "resource_directory", None)
    if not isinstance(directory, ResourceDirectory):
        raise ConfigurationError(f"Generated package does not define a resource directory: {package_dir}")
    return directory
