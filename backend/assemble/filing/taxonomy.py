"""
Folder taxonomy
===============
Fixed nine-tier folder structure for a project's document repository:

  Plan         design-phase documents (fixed leaves)
  Scheme       scheme design, one folder per consultant discipline
  Detail       detailed design, one folder per consultant discipline
  Procure      procurement and tender documents (fixed leaves)
  Delivery     construction delivery (no leaves)
  Consultants  consultant engagement, one folder per discipline
  Contractors  contractor engagement, one folder per trade
  Admin        administrative documents (fixed leaves)
  Finance      invoices, payments and budget (fixed leaves)

Discipline and trade folders come from the project's active lists, falling
back to the full catalog when a project has none.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

TIER_ORDER: Tuple[str, ...] = (
    "Plan",
    "Scheme",
    "Detail",
    "Procure",
    "Delivery",
    "Consultants",
    "Contractors",
    "Admin",
    "Finance",
)

CONSULTANT_DISCIPLINES: Tuple[str, ...] = (
    "Access", "Acoustic", "Arborist", "Architect", "ASP3", "BASIX",
    "Building Code Advice", "Bushfire", "Building Certifier", "Civil",
    "Cost Planning", "Ecology", "Electrical", "ESD", "Facade",
    "Fire Engineering", "Fire Services", "Flood", "Geotech", "Hazmat",
    "Hydraulic", "Interior Designer", "Landscape", "Mechanical", "NBN",
    "Passive Fire", "Roof Access", "Site Investigation", "Stormwater",
    "Structural", "Survey", "Traffic", "Vertical Transport",
    "Waste Management", "Wastewater", "Waterproofing",
)

CONTRACTOR_TRADES: Tuple[str, ...] = (
    "Earthworks", "Concrete", "Masonry", "Carpenter", "Steel Fixer",
    "Roofer", "Plumber", "Electrician", "HVAC Technician",
    "Insulation Installer", "Drywaller", "Plasterer", "Tiler",
    "Flooring Installer", "Painter", "Glazier", "Cabinetmaker",
    "Mason", "Welder", "Scaffolder", "Landscaper",
)

# Fixed leaves per tier. Tiers listed with None are built from disciplines/trades.
FIXED_LEAVES = {
    "Plan": ("Feasibility", "Environmental", "Technical", "Title and Survey", "Planning", "Misc"),
    "Procure": (
        "Procurement Strategy",
        "Tender Conditions",
        "Tender Schedules",
        "PPR & Preliminaries",
        "Contract",
        "Tender Pack",
        "Tender RFI and Addendum",
        "Tender Submission",
        "Tender Recommendation Report",
    ),
    "Delivery": (),
    "Admin": ("Fee and Approval", "Reports", "Misc"),
    "Finance": ("Invoices", "Payments", "Budget"),
}
DISCIPLINE_TIERS = ("Scheme", "Detail", "Consultants")
TRADE_TIERS = ("Contractors",)

INVOICES_FOLDER = "Finance/Invoices"
MISC_FOLDER = "Plan/Misc"


def normalize_folder_path(path: str) -> str:
    parts = [part.strip() for part in (path or "").replace("\\", "/").split("/")]
    return "/".join(part for part in parts if part)


def _clean(values: Optional[Iterable[str]]) -> List[str]:
    seen = set()
    out: List[str] = []
    for value in values or ():
        item = normalize_folder_path(value)
        if item and item not in seen:
            seen.add(item)
            out.append(item)
    return out


class FolderTaxonomy:
    """Canonical folder list for a discipline/trade catalog pair."""

    def __init__(
        self,
        disciplines: Sequence[str] = CONSULTANT_DISCIPLINES,
        trades: Sequence[str] = CONTRACTOR_TRADES,
    ):
        self.disciplines: Tuple[str, ...] = tuple(_clean(disciplines))
        self.trades: Tuple[str, ...] = tuple(_clean(trades))

    def build_canonical_folders(
        self,
        active_disciplines: Optional[Iterable[str]] = None,
        active_trades: Optional[Iterable[str]] = None,
    ) -> List[str]:
        disciplines = _clean(active_disciplines) or list(self.disciplines)
        trades = _clean(active_trades) or list(self.trades)

        folders: List[str] = []
        seen = set()

        def emit(path: str) -> None:
            # Parents first, each path once.
            parts = path.split("/")
            for depth in range(1, len(parts) + 1):
                prefix = "/".join(parts[:depth])
                if prefix not in seen:
                    seen.add(prefix)
                    folders.append(prefix)

        for tier in TIER_ORDER:
            if tier in DISCIPLINE_TIERS:
                leaves: Sequence[str] = disciplines
            elif tier in TRADE_TIERS:
                leaves = trades
            else:
                leaves = FIXED_LEAVES[tier]

            if tier in FIXED_LEAVES or leaves:
                emit(tier)
            for leaf in leaves:
                emit(f"{tier}/{leaf}")
        return folders


default_taxonomy = FolderTaxonomy()


def build_canonical_folders(
    active_disciplines: Optional[Iterable[str]] = None,
    active_trades: Optional[Iterable[str]] = None,
) -> List[str]:
    return default_taxonomy.build_canonical_folders(active_disciplines, active_trades)


def tier_of(path: str) -> str:
    return (path or "").strip("/").split("/")[0]


def tier_rank(path: str) -> int:
    """Position of the path's tier in TIER_ORDER; unknown tiers rank last."""
    tier = tier_of(path)
    if tier in TIER_ORDER:
        return TIER_ORDER.index(tier)
    return len(TIER_ORDER)


def sort_folders(folders: Iterable[str]) -> List[str]:
    return sorted(folders, key=lambda path: (tier_rank(path), path))
