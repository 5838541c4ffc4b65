"""
Selection Panel

Presentation logic for the popovers that list filters, segmentations and
metrics. Items are grouped by scope (properties) or group (metrics) label,
with "General" for items that have none. Picking an item drives the matching
SelectionStore transition; single-select panels close afterwards while the
metric panel stays open so several metrics can be toggled in one visit.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Set, Union

from report_builder.models.enums import PanelMode
from report_builder.models.schemas import Metric, Property
from report_builder.services.selection_store import SelectionError, SelectionStore


FALLBACK_GROUP: str = "General"

CatalogItem = Union[Property, Metric]


def group_label(item: CatalogItem) -> str:
    if isinstance(item, Metric):
        label = item.metricGroupLabel
    else:
        label = item.propertyScopeLabel
    if label is None or not label.strip():
        return FALLBACK_GROUP
    return label


def item_label(item: CatalogItem) -> str:
    if isinstance(item, Metric):
        return item.metricLabel
    return item.propertyLabel


def group_items(items: Iterable[CatalogItem]) -> Dict[str, List[CatalogItem]]:
    """Group items by label, keeping first-appearance order of groups and items."""
    groups: Dict[str, List[CatalogItem]] = {}
    for item in items:
        groups.setdefault(group_label(item), []).append(item)
    return groups


class SelectionPanel:
    """
    One selection popover bound to a store.

    Args:
        store: The store the panel feeds.
        mode: Which transition a pick triggers.
        metric_id: Target metric; required for PanelMode.METRIC_FILTER.
    """

    def __init__(self, store: SelectionStore, mode: PanelMode, metric_id: Optional[str] = None):
        if mode is PanelMode.METRIC_FILTER and not metric_id:
            raise SelectionError("A metric filter panel needs a metric_id")
        self.store = store
        self.mode = mode
        self.metric_id = metric_id
        self.is_open = False
        self.items: List[CatalogItem] = []
        self.groups: Dict[str, List[CatalogItem]] = {}
        self.collapsed: Set[str] = set()

    @property
    def single_select(self) -> bool:
        return self.mode is not PanelMode.METRIC

    def open(self, items: Sequence[CatalogItem]) -> None:
        """Show ``items``; several groups start collapsed, a single group expanded."""
        self.items = list(items)
        self.groups = group_items(self.items)
        if len(self.groups) > 1:
            self.collapsed = set(self.groups)
        else:
            self.collapsed = set()
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def toggle_group(self, label: str) -> None:
        if label in self.collapsed:
            self.collapsed.discard(label)
        elif label in self.groups:
            self.collapsed.add(label)

    def is_collapsed(self, label: str) -> bool:
        return label in self.collapsed

    def search(self, term: str) -> Dict[str, List[CatalogItem]]:
        """Groups restricted to items whose label contains ``term`` (case-insensitive)."""
        needle = term.strip().lower()
        if not needle:
            return group_items(self.items)
        return group_items(i for i in self.items if needle in item_label(i).lower())

    def is_selected(self, item: CatalogItem) -> bool:
        if isinstance(item, Metric):
            return self.store.is_metric_selected(item.metricId)
        if self.mode is PanelMode.SEGMENTATION:
            current = self.store.segmentation
            return current is not None and current.propertyId == item.propertyId
        return False

    def select(self, item: Optional[CatalogItem]) -> None:
        """Apply a pick to the store, closing the panel in single-select modes."""
        if self.mode is PanelMode.SEGMENTATION:
            if item is not None and not isinstance(item, Property):
                raise SelectionError("Segmentation panel items must be properties")
            self.store.set_segmentation(item)
        elif item is None:
            raise SelectionError(f"{self.mode.value} panel needs an item")
        elif self.mode is PanelMode.METRIC:
            if not isinstance(item, Metric):
                raise SelectionError("Metric panel items must be metrics")
            self.store.toggle_metric(item)
        elif not isinstance(item, Property):
            raise SelectionError(f"{self.mode.value} panel items must be properties")
        elif self.mode is PanelMode.FILTER:
            self.store.add_filter(item)
        else:
            self.store.add_metric_filter(self.metric_id, item)

        if self.single_select:
            self.close()
