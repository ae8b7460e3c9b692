"""
Asset Movability Policy

Validates that an asset's condition permits the requested slip movement.
"""

from typing import TYPE_CHECKING
from app.buisness.core.errors import AssetNotMovable
from app.data.core.constants import Condition, SlipType

if TYPE_CHECKING:
    from app.data.core.asset import Asset


class AssetMovabilityPolicy:
    """
    Policy object for asset movement validation.

    An asset cannot go out on an ISSUE slip while it is SCRAP or
    UNDER_MAINTENANCE. RETURN and TRANSFER are always allowed so broken
    assets can still be brought back to the store or moved for repair.
    """

    BLOCKED_FOR_ISSUE = frozenset({Condition.SCRAP, Condition.UNDER_MAINTENANCE})

    @classmethod
    def check(cls, asset: "Asset", slip_type: str) -> None:
        """
        Check if an asset can be moved on a slip of the given type.

        Args:
            asset: The asset being moved
            slip_type: ISSUE, RETURN or TRANSFER

        Raises:
            AssetNotMovable: If the asset is blocked for this movement
        """
        if not cls.can_move(asset, slip_type):
            raise AssetNotMovable(asset.id, asset.condition)

    @classmethod
    def can_move(cls, asset: "Asset", slip_type: str) -> bool:
        if slip_type != SlipType.ISSUE:
            return True
        return asset.condition not in cls.BLOCKED_FOR_ISSUE
