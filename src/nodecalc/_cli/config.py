"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

from nodecalc._eval_engine import DEFAULT_MAX_ITERATIONS


class ConfigError(Exception):
    """Error in nodecalc configuration."""


@dataclass(slots=True, frozen=True)
class NodecalcConfig:
    """Configuration loaded from pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    graph: Path | None = None
    output: Path | None = None
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _parse_path(section: dict[str, object], key: str, project_root: Path) -> Path | None:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, str):
        msg = f"Invalid [tool.nodecalc].{key}: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    if not path.is_absolute():
        path = project_root / path
    return path


def _parse_max_iterations(section: dict[str, object]) -> int:
    value = section.get("max_iterations", DEFAULT_MAX_ITERATIONS)
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        msg = f"Invalid [tool.nodecalc].max_iterations: expected a positive integer, got {value!r}"
        raise ConfigError(msg)
    return value


def load_config(pyproject_path: Path) -> NodecalcConfig:
    """Load and validate [tool.nodecalc] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed NodecalcConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("nodecalc", {})
    if not isinstance(section, dict):
        msg = "Invalid [tool.nodecalc]: expected a table"
        raise ConfigError(msg)
    if not section:
        return NodecalcConfig(project_root=project_root)

    unknown = set(section) - {"graph", "output", "max_iterations"}
    if unknown:
        msg = f"Unknown [tool.nodecalc] keys: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)

    return NodecalcConfig(
        graph=_parse_path(section, "graph", project_root),
        output=_parse_path(section, "output", project_root),
        max_iterations=_parse_max_iterations(section),
        project_root=project_root,
    )


def get_config() -> NodecalcConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        NodecalcConfig (may be empty if no pyproject.toml or no [tool.nodecalc] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return NodecalcConfig()
    return load_config(pyproject_path)
