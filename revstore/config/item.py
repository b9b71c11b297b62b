from __future__ import annotations

from datasalad.settings import Setting


class ConfigItem(Setting):
    """Individual configuration item

    Values read from Git configuration are always ``str``. Any conversion
    to a more specific type is performed by the item's ``coercer`` on
    access of the ``value`` property. Implementation defaults declare a
    coercer for their keys, and it is retained when a value from a higher
    precedence source is merged into a default.
    """
