"""
View Types - Cac gia tri tra ve cho host editor render

Host chiu trach nhiem render, module nay chi mo ta du lieu.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, List, Optional


class TreeItemCollapsibleState(IntEnum):
    NONE = 0
    COLLAPSED = 1
    EXPANDED = 2


@dataclass(frozen=True)
class Command:
    """Command host se thuc thi khi user click item/lens."""

    command: str
    title: str
    arguments: List[Any] = field(default_factory=list)


@dataclass
class TreeItem:
    """
    Item hien thi trong tree view.

    Attributes:
        label: Ten hien thi (basename)
        path: Duong dan tuyet doi (resource)
        collapsible_state: NONE cho file, COLLAPSED cho thu muc
        command: Command khi click (chi co voi file)
        context_value: Key cho context menu ("file" / None)
    """

    label: str
    path: str
    collapsible_state: TreeItemCollapsibleState
    command: Optional[Command] = None
    context_value: Optional[str] = None
