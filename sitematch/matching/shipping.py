"""Region-to-region freight transit estimate.

Pure lookup over the configured remote set and coarse region groups; no date
math happens here.
"""

from __future__ import annotations

from sitematch.config import ShippingConfig, get_config


def estimate_shipping_days(
    origin: str, destination: str, config: ShippingConfig | None = None
) -> int:
    """Estimate calendar days for freight from ``origin`` to ``destination``.

    Rules (applied in order):
    1. Same region → same_region_days (2)
    2. Otherwise base_days (5)
    3. + remote_surcharge_days (3) for each remote endpoint
    4. - same_group_reduction_days (2) if both share a group other than the
       remote-only group
    5. Floor at min_days (2)

    Args:
        origin: Region code the product ships from
        destination: Project region code
        config: Shipping rules (default from get_config())

    Returns:
        Estimated transit days (>= min_days)
    """
    if config is None:
        config = get_config().shipping

    origin = (origin or "").strip().upper()
    destination = (destination or "").strip().upper()

    if origin == destination:
        return max(config.same_region_days, config.min_days)

    days = config.base_days

    if origin in config.remote_regions:
        days += config.remote_surcharge_days
    if destination in config.remote_regions:
        days += config.remote_surcharge_days

    origin_group = config.group_of(origin)
    destination_group = config.group_of(destination)
    if (
        origin_group is not None
        and origin_group == destination_group
        and origin_group != config.remote_only_group
    ):
        days -= config.same_group_reduction_days

    return max(days, config.min_days)
