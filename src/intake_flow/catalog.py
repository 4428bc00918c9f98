"""ScreenCatalog: the ordered, immutable sequence of onboarding screens.

The catalog is loaded once (usually from ``v1/screens.yaml``) and shared
read-only by every flow instance.  Construction validates the structural
invariants the navigation controller relies on, so a malformed catalog is
rejected before any flow can start.

Usage::

    catalog = ScreenCatalog.from_yaml()        # defaults to v1/screens.yaml
    first = catalog[0]
    terminal = catalog.terminal
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

import yaml
from pydantic import TypeAdapter, ValidationError

from intake_flow.constants import CATALOG_FILENAME, CATALOG_PATH
from intake_flow.errors import CatalogError
from intake_flow.models.screen import Screen

logger = logging.getLogger(__name__)

_SCREEN_ADAPTER: TypeAdapter[Screen] = TypeAdapter(Screen)


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------

def find_repo_root(start: Optional[Path] = None) -> Path:
    """Walk upwards from *start* to find the repo root (dir with pyproject.toml or .git).

    Falls back to cwd if no marker is found.
    """
    p = (start or Path(__file__).resolve()).parent
    for parent in [p, *p.parents]:
        if (parent / "pyproject.toml").exists() or (parent / ".git").exists():
            return parent
    return Path.cwd()


def default_catalog_path() -> Path:
    """``INTAKE_CATALOG_PATH`` if set, else ``<repo root>/v1/screens.yaml``."""
    if CATALOG_PATH:
        return Path(CATALOG_PATH)
    return find_repo_root() / "v1" / CATALOG_FILENAME


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def parse_screen(raw: dict) -> Screen:
    """Validate one raw descriptor dict into its typed screen model."""
    return _SCREEN_ADAPTER.validate_python(raw)


# ---------------------------------------------------------------------------
# ScreenCatalog
# ---------------------------------------------------------------------------

class ScreenCatalog:
    """Ordered screen descriptors with the invariants checked up front.

    Invariants enforced at construction:

      - at least one screen
      - screen ids are unique (they are the sort key)
      - answer keys are unique across screens, so no two screens overwrite
        each other's answers
      - only the last screen may carry an extra step, and when
        ``require_extra_step`` is true (the default) it must carry one
    """

    def __init__(
        self,
        screens: Iterable[Screen],
        *,
        require_extra_step: bool = True,
    ) -> None:
        ordered = sorted(screens, key=lambda s: s.id)
        self._validate(ordered, require_extra_step)
        self._screens: tuple[Screen, ...] = tuple(ordered)

    @classmethod
    def from_dicts(
        cls, raw_screens: Iterable[dict], *, require_extra_step: bool = True
    ) -> "ScreenCatalog":
        """Build a catalog from raw descriptor dicts (e.g. parsed YAML)."""
        screens = []
        for raw in raw_screens:
            try:
                screens.append(parse_screen(raw))
            except ValidationError as exc:
                raise CatalogError(
                    f"Invalid screen descriptor {raw.get('id', '?')!r}: {exc}"
                ) from exc
        return cls(screens, require_extra_step=require_extra_step)

    @classmethod
    def from_yaml(
        cls, path: Path | str | None = None, *, require_extra_step: bool = True
    ) -> "ScreenCatalog":
        """Load the catalog from a YAML file holding a ``screens`` list."""
        path = Path(path) if path is not None else default_catalog_path()
        data = load_yaml(path)
        if not isinstance(data, dict) or not isinstance(data.get("screens"), list):
            raise CatalogError(f"{path}: expected a mapping with a 'screens' list")
        catalog = cls.from_dicts(data["screens"], require_extra_step=require_extra_step)
        logger.info("ScreenCatalog loaded: %d screens from %s", len(catalog), path)
        return catalog

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(screens: list[Screen], require_extra_step: bool) -> None:
        if not screens:
            raise CatalogError("Screen catalog is empty")

        ids = [s.id for s in screens]
        dupes = sorted({i for i in ids if ids.count(i) > 1})
        if dupes:
            raise CatalogError(f"Duplicate screen ids: {dupes}")

        owners: dict[str, int] = {}
        for screen in screens:
            for key in screen.answer_keys:
                if key in owners:
                    raise CatalogError(
                        f"Answer key '{key}' used by screens {owners[key]} and {screen.id}"
                    )
                owners[key] = screen.id

        flagged = [s.id for s in screens if s.has_extra_step]
        if len(flagged) > 1:
            raise CatalogError(f"More than one screen carries an extra step: {flagged}")
        if flagged and flagged[0] != screens[-1].id:
            raise CatalogError(
                f"Extra step on screen {flagged[0]} but the last screen is {screens[-1].id}"
            )
        if require_extra_step and not flagged:
            raise CatalogError("No screen carries the extra step")

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._screens)

    def __iter__(self) -> Iterator[Screen]:
        return iter(self._screens)

    def __getitem__(self, index: int) -> Screen:
        return self._screens[index]

    @property
    def last_index(self) -> int:
        return len(self._screens) - 1

    @property
    def terminal(self) -> Screen:
        """The last screen; advancing past it triggers completion."""
        return self._screens[-1]

    def get_by_id(self, screen_id: int) -> Screen:
        """Look up a screen by its ``id``; raises KeyError if absent."""
        for screen in self._screens:
            if screen.id == screen_id:
                return screen
        raise KeyError(f"Screen not found: id={screen_id}")

    def index_of(self, screen_id: int) -> int:
        """Cursor position of the screen with ``screen_id``."""
        for i, screen in enumerate(self._screens):
            if screen.id == screen_id:
                return i
        raise KeyError(f"Screen not found: id={screen_id}")
